from __future__ import annotations

import json
from pathlib import Path

import click
import pytest
from click.testing import CliRunner
from pytest import MonkeyPatch

from baseline import __version__, cli
from baseline.dataset import FeatureDataset
from baseline.exceptions import BaselineError


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, ["--help"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "--target" in result.output


def test_version() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_requires_input() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, [])
    assert result.exit_code == 2
    assert "Provide at least one file or --feature." in result.output


@pytest.mark.parametrize(
    ("name", "text", "expected"),
    [
        ("a.css", "", "css"),
        ("a.PCSS", "", "css"),
        ("A.vue", "", "vue"),
        ("a.component.ts", "@Component({})", "angular"),
        ("a.ts", "const a = 1", "js"),
        ("A.tsx", "@Component({})", "js"),
        ("a.mjs", "", "js"),
    ],
)
def test_classify_source(name: str, text: str, expected: str) -> None:
    assert cli.classify_source(Path(name), text) == expected


def test_classify_source_rejects_unknown_types() -> None:
    with pytest.raises(click.UsageError):
        cli.classify_source(Path("notes.md"), "")


def test_unsupported_file_is_a_usage_error(tmp_path: Path, data_file: Path) -> None:
    path = _write(tmp_path, "notes.md", "# hi")

    result = CliRunner().invoke(cli.main, [str(path), "--data", str(data_file)])

    assert result.exit_code == 2
    assert "Unsupported file type" in result.output


def test_css_file_as_json(tmp_path: Path, data_file: Path) -> None:
    path = _write(tmp_path, "card.css", ".card { display: grid; }\n.a:has(img) { color: red; }\n")

    result = CliRunner().invoke(
        cli.main, [str(path), "--data", str(data_file), "--format", "json", "-t", "newly"]
    )

    assert result.exit_code == 0
    document = json.loads(result.output)
    assert document["storyId"] == str(path)
    assert document["source"] == "auto"
    assert [feature["featureId"] for feature in document["features"]] == ["grid", "has"]
    assert document["target"] == "newly"
    assert document["nonCompliantFeatures"] == 0


def test_manual_features_as_csv(data_file: Path) -> None:
    result = CliRunner().invoke(
        cli.main,
        ["-f", "grid", "-f", "subgrid", "--data", str(data_file), "--format", "csv", "-t", "newly"],
    )

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "Feature ID,Feature Name,Support Level,Baseline Status,Browsers",
        '"grid","Grid","widely","high","chrome; edge; firefox; safari"',
        '"subgrid","Subgrid","newly","low","chrome; firefox; safari"',
    ]


def test_multiple_files_as_json_list(tmp_path: Path, data_file: Path) -> None:
    css = _write(tmp_path, "a.css", ".a { display: flex; }")
    js = _write(
        tmp_path,
        "B.jsx",
        "import styled from 'styled-components';\nconst B = styled.div`position: sticky;`;\n",
    )

    result = CliRunner().invoke(
        cli.main, [str(css), str(js), "--data", str(data_file), "--format", "json"]
    )

    assert result.exit_code == 0
    documents = json.loads(result.output)
    assert [document["storyId"] for document in documents] == [str(css), str(js)]
    assert documents[1]["features"][0]["featureId"] == "sticky-positioning"


def test_csv_with_many_files_is_rejected(tmp_path: Path, data_file: Path) -> None:
    first = _write(tmp_path, "a.css", ".a {}")
    second = _write(tmp_path, "b.css", ".b {}")

    result = CliRunner().invoke(
        cli.main, [str(first), str(second), "--data", str(data_file), "--format", "csv"]
    )

    assert result.exit_code == 2
    assert "single file" in result.output


def test_text_output(tmp_path: Path, data_file: Path) -> None:
    path = _write(tmp_path, "card.css", ".card { display: grid; }")

    result = CliRunner().invoke(
        cli.main, [str(path), "--data", str(data_file), "--story-id", "card"]
    )

    assert result.exit_code == 0
    assert "Target: Baseline 2024" in result.output
    assert "Grid" in result.output


def test_show_source_prints_fragments(tmp_path: Path, data_file: Path) -> None:
    path = _write(tmp_path, "Card.vue", "<style scoped>\n.card { aspect-ratio: 1; }\n</style>\n")

    result = CliRunner().invoke(
        cli.main, [str(path), "--data", str(data_file), "--show-source", "--format", "json"]
    )

    assert result.exit_code == 0
    assert json.loads(result.output)["features"][0]["featureId"] == "aspect-ratio"

    result = CliRunner().invoke(cli.main, [str(path), "--data", str(data_file), "--show-source"])

    assert "Extracted CSS" in result.output
    assert ".card { aspect-ratio: 1; }" in result.output


def test_strict_exits_on_non_compliant(data_file: Path) -> None:
    runner = CliRunner()

    strict = ["--data", str(data_file), "--strict", "--format", "json"]
    failing = runner.invoke(cli.main, ["-f", "has", *strict])
    passing = runner.invoke(cli.main, ["-f", "grid", *strict])

    assert failing.exit_code == 1
    assert "storyId" in failing.output
    assert passing.exit_code == 0


def test_default_dataset_is_used_without_data(
    monkeypatch: MonkeyPatch, dataset: FeatureDataset
) -> None:
    monkeypatch.setattr(cli, "get_default_dataset", lambda: dataset)

    result = CliRunner().invoke(cli.main, ["-f", "grid", "--format", "json"])

    assert result.exit_code == 0
    assert json.loads(result.output)["compliantFeatures"] == 1


def test_library_error_becomes_click_error(monkeypatch: MonkeyPatch) -> None:
    def _boom(_data_path: str | None) -> FeatureDataset:
        raise BaselineError("boom")

    monkeypatch.setattr(cli, "_load_dataset", _boom)

    result = CliRunner().invoke(cli.main, ["-f", "grid"])

    assert result.exit_code == 1
    assert "Error: boom" in result.output
