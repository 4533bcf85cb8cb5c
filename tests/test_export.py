from __future__ import annotations

import json

from baseline.dataset import FeatureDataset
from baseline.export import (
    EXPORTERS,
    export_as_csv,
    export_as_html,
    export_as_json,
    prepare_export_data,
)
from baseline.model import ExportData
from baseline.orchestrator import evaluate_story

EXPORTED_AT = "2025-01-02T03:04:05.000Z"


def _data(dataset: FeatureDataset, story_id: str = "button--primary") -> ExportData:
    payload = evaluate_story(story_id, {"features": ["grid", "has", "mystery"]}, dataset=dataset)
    return prepare_export_data(payload, exported_at=EXPORTED_AT)


def test_prepare_export_data(dataset: FeatureDataset) -> None:
    data = _data(dataset)

    assert data.story_id == "button--primary"
    assert data.target == "2024"
    assert data.source == "manual"
    assert data.total_features == 3
    assert data.compliant_features == 1
    assert data.non_compliant_features == 2
    assert data.exported_at == EXPORTED_AT


def test_prepare_export_data_without_summary(dataset: FeatureDataset) -> None:
    payload = evaluate_story("empty", {}, dataset=dataset)
    data = prepare_export_data(payload)

    assert data.total_features == 0
    assert data.features == ()
    assert data.exported_at.endswith("Z")


def test_export_as_json(dataset: FeatureDataset) -> None:
    document = json.loads(export_as_json(_data(dataset)))

    assert document["storyId"] == "button--primary"
    assert document["totalFeatures"] == 3
    assert document["exportedAt"] == EXPORTED_AT
    assert [feature["featureId"] for feature in document["features"]] == ["grid", "has", "mystery"]
    assert document["features"][2]["found"] is False


def test_export_as_csv(dataset: FeatureDataset) -> None:
    assert export_as_csv(_data(dataset)).splitlines() == [
        "Feature ID,Feature Name,Support Level,Baseline Status,Browsers",
        '"grid","Grid","widely","high","chrome; edge; firefox; safari"',
        '"has",":has()","newly","low","chrome; edge; safari"',
        '"mystery","mystery","not","unknown",""',
    ]


def test_export_as_csv_quotes_embedded_quotes(dataset: FeatureDataset) -> None:
    custom = FeatureDataset.from_mapping(
        {"odd": {"kind": "feature", "name": 'Say "hi", ok', "status": {"baseline": "high"}}}
    )
    payload = evaluate_story("s", {"features": ["odd"]}, dataset=custom)

    assert export_as_csv(prepare_export_data(payload, EXPORTED_AT)).splitlines()[1] == (
        '"odd","Say ""hi"", ok","widely","high",""'
    )


def test_export_as_html_escapes_values(dataset: FeatureDataset) -> None:
    html = export_as_html(_data(dataset, story_id="<script>alert(1)</script>"))

    assert "<title>Baseline Report - &lt;script&gt;alert(1)&lt;/script&gt;</title>" in html
    assert "<script>alert(1)</script>" not in html
    assert "<h1>Baseline Compatibility Report</h1>" in html
    assert "<strong>Target:</strong> Baseline 2024" in html
    assert "<strong>Exported:</strong> 2025-01-02 03:04:05 UTC" in html
    assert 'class="badge badge-newly"' in html
    assert "<strong>:has()</strong>" in html
    assert "Generated by pybaseline" in html


def test_exporters_registry() -> None:
    assert set(EXPORTERS) == {"json", "csv", "html"}
