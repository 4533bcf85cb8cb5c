from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from baseline.dataset import FeatureDataset


def _feature(name: str, baseline: Any, *browsers: str) -> dict[str, Any]:
    return {
        "kind": "feature",
        "name": name,
        "description": f"{name} description",
        "status": {
            "baseline": baseline,
            "support": {browser: "1" for browser in browsers},
        },
    }


FEATURES: dict[str, Any] = {
    "grid": _feature("Grid", "high", "chrome", "edge", "firefox", "safari"),
    "flexbox": _feature("Flexbox", "high", "chrome", "edge", "firefox", "safari"),
    "subgrid": _feature("Subgrid", "low", "chrome", "firefox", "safari"),
    "has": _feature(":has()", "low", "chrome", "edge", "safari"),
    "is": _feature(":is()", "high", "chrome", "firefox"),
    "container-queries": _feature("Container queries", "low", "chrome", "safari"),
    "nesting": _feature("Nesting", "low", "chrome", "safari"),
    "math-functions": _feature("min(), max(), and clamp()", "high", "chrome"),
    "oklch-colors": _feature("Oklab and OkLCh", "low", "chrome"),
    "sticky-positioning": _feature("Sticky positioning", "high", "chrome"),
    "transforms2d": _feature("2D transforms", "high", "chrome"),
    "cascade-layers": _feature("Cascade layers", "high", "chrome"),
    "aspect-ratio": _feature("aspect-ratio", "high", "chrome"),
    "logical-properties": _feature("Logical properties", "high", "chrome"),
    "anchor-positioning": _feature("Anchor positioning", False, "chrome"),
    "cascade-scope": _feature("@scope", None, "chrome"),
    "gap-decorations": {"kind": "moved", "redirect_target": "grid"},
}


@pytest.fixture
def dataset() -> FeatureDataset:
    return FeatureDataset.from_mapping({"features": FEATURES}, origin="test")


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"features": FEATURES}), encoding="utf-8")
    return path
