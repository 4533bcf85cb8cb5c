"""Serialize summary payloads as JSON, CSV or a standalone HTML report."""

from __future__ import annotations

import csv
from datetime import datetime, timezone
from html import escape
import io
import json

from .constants import CSV_HEADERS
from .model import BaselineFeatureUsage, ExportData, SummaryEventPayload


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def prepare_export_data(payload: SummaryEventPayload, exported_at: str | None = None) -> ExportData:
    summary = payload.summary
    return ExportData(
        story_id=payload.story_id,
        target=payload.target,
        source=payload.source,
        annotated_count=payload.annotated_count,
        detected_count=payload.detected_count,
        total_features=summary.total_count if summary else 0,
        compliant_features=summary.compliant_count if summary else 0,
        non_compliant_features=summary.non_compliant_count if summary else 0,
        features=summary.features if summary else (),
        exported_at=exported_at or _utc_now_iso(),
    )


def export_as_json(data: ExportData) -> str:
    return json.dumps(data.to_dict(), indent=2, ensure_ascii=False)


def export_as_csv(data: ExportData) -> str:
    """Header line followed by one fully quoted row per feature."""
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for feature in data.features:
        writer.writerow(
            [
                feature.feature_id,
                feature.name,
                feature.support,
                feature.baseline or "unknown",
                "; ".join(feature.browsers),
            ]
        )
    return buffer.getvalue().rstrip("\n")


_HTML_STYLE = """
    body {
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
      max-width: 1200px;
      margin: 40px auto;
      padding: 20px;
      background: #f5f5f5;
    }
    .container { background: white; border-radius: 8px; padding: 32px; }
    h1 { margin: 0 0 8px 0; color: #333; }
    .meta { color: #666; font-size: 14px; margin-bottom: 24px; }
    .summary {
      display: grid;
      grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
      gap: 16px;
      margin-bottom: 32px;
    }
    .summary-card { padding: 16px; border-radius: 6px; border: 1px solid #e0e0e0; }
    .summary-card h3 { margin: 0 0 8px 0; font-size: 14px; color: #666; }
    .summary-card .value { font-size: 32px; font-weight: 600; color: #333; }
    table { width: 100%; border-collapse: collapse; margin-top: 24px; }
    th, td { padding: 12px; text-align: left; border-bottom: 1px solid #e0e0e0; }
    .badge { display: inline-block; padding: 4px 8px; border-radius: 4px; font-size: 11px; }
    .badge-widely { background: #d4edda; color: #155724; }
    .badge-newly { background: #fff3cd; color: #856404; }
    .badge-not { background: #f8d7da; color: #721c24; }
    .footer { margin-top: 32px; color: #666; font-size: 12px; }
"""


def _format_exported(value: str) -> str:
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return moment.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _feature_row(feature: BaselineFeatureUsage) -> str:
    browsers = ", ".join(feature.browsers) or "—"
    return (
        "        <tr>\n"
        f"          <td><strong>{escape(feature.name)}</strong><br>"
        f'<small style="color: #666;">{escape(feature.feature_id)}</small></td>\n'
        f'          <td><span class="badge badge-{escape(feature.support)}">'
        f"{escape(feature.support)}</span></td>\n"
        f"          <td>{escape(feature.baseline or 'unknown')}</td>\n"
        f"          <td>{escape(browsers)}</td>\n"
        "        </tr>"
    )


def export_as_html(data: ExportData) -> str:
    """Render a self-contained report page; every dynamic value is escaped."""
    rows = "\n".join(_feature_row(feature) for feature in data.features)
    story = escape(data.story_id)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Baseline Report - {story}</title>
  <style>{_HTML_STYLE}  </style>
</head>
<body>
  <div class="container">
    <h1>Baseline Compatibility Report</h1>
    <div class="meta">
      <strong>Story:</strong> {story}<br>
      <strong>Target:</strong> Baseline {escape(data.target)}<br>
      <strong>Source:</strong> {escape(data.source)}<br>
      <strong>Exported:</strong> {escape(_format_exported(data.exported_at))}
    </div>
    <div class="summary">
      <div class="summary-card"><h3>Total Features</h3><div class="value">{data.total_features}</div></div>
      <div class="summary-card"><h3>Compliant</h3><div class="value" style="color: #28a745;">{data.compliant_features}</div></div>
      <div class="summary-card"><h3>Non-Compliant</h3><div class="value" style="color: #dc3545;">{data.non_compliant_features}</div></div>
    </div>
    <table>
      <thead>
        <tr>
          <th>Feature</th>
          <th>Support Level</th>
          <th>Baseline Status</th>
          <th>Browsers</th>
        </tr>
      </thead>
      <tbody>
{rows}
      </tbody>
    </table>
    <div class="footer">Generated by pybaseline</div>
  </div>
</body>
</html>"""


EXPORTERS = {
    "json": export_as_json,
    "csv": export_as_csv,
    "html": export_as_html,
}
