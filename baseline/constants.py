"""Constants used across pybaseline."""

from __future__ import annotations

from typing import Final, Literal

DEFAULT_BASELINE_TARGET: Final[str] = "2024"

TARGET_THRESHOLDS: Final[dict[str, Literal["high", "low"]]] = {
    "2025": "high",
    "2024": "high",
    "widely": "high",
    "widely-available": "high",
    "2023": "low",
    "2022": "low",
    "newly": "low",
    "newly-available": "low",
}
DEFAULT_THRESHOLD: Final[Literal["high", "low"]] = "high"

SUPPORT_LEVEL_MAP: Final[dict[str, Literal["widely", "newly"]]] = {
    "high": "widely",
    "low": "newly",
}

FEATURES_DATA_URL: Final[str] = "https://unpkg.com/web-features/data.json"
FEATURES_DATA_ENV: Final[str] = "BASELINE_FEATURES_DATA"
DEBUG_ENV: Final[str] = "PYBASELINE_DEBUG"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0

DYNAMIC_PLACEHOLDER: Final[str] = "/* dynamic */"
FRAGMENT_SEPARATOR: Final[str] = "\n\n"

ALL_LIBRARIES: Final[str] = "all"
LIBRARY_IMPORT_SOURCES: Final[dict[str, tuple[str, ...]]] = {
    "styled-components": ("styled-components",),
    "emotion": ("@emotion/react", "@emotion/styled", "@emotion/css"),
    "stitches": ("@stitches/react", "@stitches/core"),
    "vue-styled-components": ("vue-styled-components",),
    "pinceau": ("pinceau", "@pinceau/vue"),
}
VUE_CSS_IN_JS_MARKERS: Final[tuple[str, ...]] = ("vue-styled-components", "pinceau")
STITCHES_VARIANT_KEYS: Final[frozenset[str]] = frozenset(
    {"variants", "compoundVariants", "defaultVariants"}
)

VUE_PLAIN_STYLE_LANGS: Final[frozenset[str]] = frozenset({"css", "postcss"})

ANGULAR_ENCAPSULATION_MODES: Final[dict[str, str]] = {
    "Emulated": "Emulated",
    "None": "None",
    "ShadowDom": "ShadowDom",
    "0": "Emulated",
    "2": "None",
    "3": "ShadowDom",
}

SUPPORT_ICON_MAP: Final[dict[str, str]] = {
    "widely": "✅",
    "newly": "◐",
    "not": "❌",
}

SUPPORT_LABEL_MAP: Final[dict[str, str]] = {
    "widely": "Widely available",
    "newly": "Newly available",
    "not": "Limited availability",
}

CSV_HEADERS: Final[tuple[str, ...]] = (
    "Feature ID",
    "Feature Name",
    "Support Level",
    "Baseline Status",
    "Browsers",
)
