"""Basic terminal renderer for story summaries."""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .constants import SUPPORT_ICON_MAP, SUPPORT_LABEL_MAP
from .model import BaselineFeatureUsage, SummaryEventPayload
from .summary import meets_target
from .util.text import ellipsize

_BROWSERS_WIDTH = 60


def _feature_line(feature: BaselineFeatureUsage, threshold: str) -> Text:
    icon = SUPPORT_ICON_MAP.get(feature.support, SUPPORT_ICON_MAP["not"])
    label = SUPPORT_LABEL_MAP.get(feature.support, SUPPORT_LABEL_MAP["not"])
    style = "green" if meets_target(feature.baseline, threshold) else "red"
    line = Text(f"  {icon} ")
    line.append(feature.name, style=f"bold {style}")
    line.append(f" ({feature.feature_id}) {label}")
    if not feature.found:
        line.append(" [not in dataset]", style="dim")
    return line


def render_basic(payload: SummaryEventPayload) -> Group:
    """Render one story's summary as a Rich renderable group."""
    lines: list[Text] = []
    summary = payload.summary

    lines.append(Text(f"Target: Baseline {payload.target}", style="bold"))
    lines.append(
        Text(
            f"Source: {payload.source}  "
            f"Annotated: {payload.annotated_count}  Detected: {payload.detected_count}"
        )
    )

    if summary is None:
        lines.append(Text(""))
        lines.append(Text("No CSS features detected.", style="dim"))
    else:
        lines.append(
            Text(
                f"Compliant: {summary.compliant_count}/{summary.total_count}  "
                f"Non-compliant: {summary.non_compliant_count}"
            )
        )
        lines.append(Text(""))
        lines.append(Text("Features", style="bold"))
        for feature in summary.features:
            lines.append(_feature_line(feature, summary.threshold))
            if feature.browsers:
                browsers = ellipsize(", ".join(feature.browsers), _BROWSERS_WIDTH)
                lines.append(Text(f"      {browsers}", style="dim"))

    if payload.warning:
        lines.append(Text(""))
        lines.append(Text(f"⚠ {payload.warning}", style="yellow"))

    if payload.errors:
        lines.append(Text(""))
        lines.append(Text("Notes", style="bold"))
        for error in payload.errors:
            lines.append(Text(f"  {error}", style="dim"))

    if payload.fragments:
        lines.append(Text(""))
        lines.append(Text("Extracted CSS", style="bold"))
        for fragment in payload.fragments:
            lines.append(Text(f"  [{fragment.origin} {fragment.pattern}]", style="cyan"))
            lines.append(Text(fragment.css_text))

    compliant = summary is None or summary.non_compliant_count == 0
    border = "green" if compliant else "red"
    return Group(Panel(Group(*lines), border_style=border, title=payload.story_id))
