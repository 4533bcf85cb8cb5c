"""Data models for extraction, feature mapping and baseline summaries."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

NodeKind = Literal["declaration", "at-rule", "selector"]
SupportLevel = Literal["widely", "newly", "not"]
BaselineRawStatus = Literal["high", "low"] | None
Threshold = Literal["high", "low"]
SummarySource = Literal["manual", "auto", "none"]
FragmentOrigin = Literal[
    "css",
    "styled-components",
    "emotion",
    "stitches",
    "vue-styled-components",
    "pinceau",
    "angular-component",
    "vue-sfc",
]


@dataclass(frozen=True)
class SourceLocation:
    source: str | None = None
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True)
class StructuralFeatureNode:
    kind: NodeKind
    name: str
    value: str | None = None
    params: str | None = None
    location: SourceLocation | None = None


@dataclass(frozen=True)
class CssParseResult:
    source: str
    nodes: list[StructuralFeatureNode]


@dataclass(frozen=True)
class ExtractedStyleFragment:
    css_text: str
    origin: FragmentOrigin
    pattern: str
    location: SourceLocation | None = None
    interpolations: int = 0
    has_variants: bool = False
    scoped: bool = False
    module: bool = False
    lang: str | None = None
    encapsulation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "css": self.css_text,
            "source": self.origin,
            "pattern": self.pattern,
        }
        if self.location is not None:
            data["location"] = {"line": self.location.line, "column": self.location.column}
        if self.interpolations:
            data["interpolations"] = self.interpolations
        if self.origin == "stitches":
            data["hasVariants"] = self.has_variants
        if self.origin == "vue-sfc":
            data["scoped"] = self.scoped
            data["module"] = self.module
            data["lang"] = self.lang or "css"
        if self.encapsulation is not None:
            data["encapsulation"] = self.encapsulation
        return data


@dataclass(frozen=True)
class AnalysisResult:
    source: str
    extracted_styles: list[ExtractedStyleFragment] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Detection:
    """Feature ids detected for one analysis result, plus parse advisories."""

    feature_ids: list[str]
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BaselineFeatureUsage:
    feature_id: str
    name: str
    support: SupportLevel
    baseline: BaselineRawStatus
    browsers: tuple[str, ...] = ()
    found: bool = True
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "featureId": self.feature_id,
            "name": self.name,
            "support": self.support,
            "baseline": self.baseline,
            "browsers": list(self.browsers),
            "found": self.found,
        }
        if self.description:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class BaselineStatusSummary:
    target: str
    threshold: Threshold
    total_count: int
    compliant_count: int
    non_compliant_count: int
    features: tuple[BaselineFeatureUsage, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "threshold": self.threshold,
            "totalCount": self.total_count,
            "compliantCount": self.compliant_count,
            "nonCompliantCount": self.non_compliant_count,
            "features": [feature.to_dict() for feature in self.features],
        }


@dataclass(frozen=True)
class SummaryEventPayload:
    story_id: str
    target: str
    annotated_count: int
    detected_count: int
    source: SummarySource
    features: tuple[str, ...]
    summary: BaselineStatusSummary | None
    errors: tuple[str, ...] = ()
    warning: str | None = None
    fragments: tuple[ExtractedStyleFragment, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "storyId": self.story_id,
            "target": self.target,
            "annotatedCount": self.annotated_count,
            "detectedCount": self.detected_count,
            "source": self.source,
            "features": list(self.features),
            "summary": self.summary.to_dict() if self.summary is not None else None,
        }
        if self.errors:
            data["errors"] = list(self.errors)
        if self.warning:
            data["warning"] = self.warning
        if self.fragments:
            data["fragments"] = [fragment.to_dict() for fragment in self.fragments]
        return data


@dataclass(frozen=True)
class ExportData:
    story_id: str
    target: str
    source: SummarySource
    annotated_count: int
    detected_count: int
    total_features: int
    compliant_features: int
    non_compliant_features: int
    features: tuple[BaselineFeatureUsage, ...]
    exported_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "storyId": self.story_id,
            "target": self.target,
            "source": self.source,
            "annotatedCount": self.annotated_count,
            "detectedCount": self.detected_count,
            "totalFeatures": self.total_features,
            "compliantFeatures": self.compliant_features,
            "nonCompliantFeatures": self.non_compliant_features,
            "features": [feature.to_dict() for feature in self.features],
            "exportedAt": self.exported_at,
        }


def _string_list(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(item for item in value if isinstance(item, str))
    return ()


def _flag(mapping: Mapping[str, object], key: str, default: bool) -> bool:
    value = mapping.get(key)
    return value if isinstance(value, bool) else default


def _text(mapping: Mapping[str, object], key: str) -> str | None:
    value = mapping.get(key)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class CssInJsConfig:
    enabled: bool = True
    libraries: tuple[str, ...] = ("all",)
    ignore_interpolations: bool = False
    show_source: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object] | None) -> CssInJsConfig:
        if not isinstance(mapping, Mapping):
            return cls()
        libraries = _string_list(mapping.get("libraries")) or ("all",)
        return cls(
            enabled=_flag(mapping, "enabled", True),
            libraries=libraries,
            ignore_interpolations=_flag(mapping, "ignoreInterpolations", False),
            show_source=_flag(mapping, "showSource", False),
        )


@dataclass(frozen=True)
class StoryParameters:
    features: tuple[str, ...] = ()
    target: str | None = None
    css: tuple[str, ...] = ()
    auto_detect: bool = True
    css_in_js: CssInJsConfig = field(default_factory=CssInJsConfig)
    js_source: str | None = None
    auto_detect_js: bool = True
    vue_source: str | None = None
    auto_detect_vue: bool = True
    angular_source: str | None = None
    auto_detect_angular: bool = True
    warn_on_non_baseline: bool = True
    ignore_warnings: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object] | None) -> StoryParameters:
        """Build parameters from a host configuration object, dropping mistyped values."""
        if not isinstance(mapping, Mapping):
            return cls()
        css_in_js = mapping.get("cssInJS")
        return cls(
            features=_string_list(mapping.get("features"))
            if isinstance(mapping.get("features"), (list, tuple))
            else (),
            target=_text(mapping, "target"),
            css=_string_list(mapping.get("css")),
            auto_detect=_flag(mapping, "autoDetect", True),
            css_in_js=CssInJsConfig.from_mapping(
                css_in_js if isinstance(css_in_js, Mapping) else None
            ),
            js_source=_text(mapping, "jsSource"),
            auto_detect_js=_flag(mapping, "autoDetectJS", True),
            vue_source=_text(mapping, "vueSource"),
            auto_detect_vue=_flag(mapping, "autoDetectVue", True),
            angular_source=_text(mapping, "angularSource"),
            auto_detect_angular=_flag(mapping, "autoDetectAngular", True),
            warn_on_non_baseline=_flag(mapping, "warnOnNonBaseline", True),
            ignore_warnings=_flag(mapping, "ignoreWarnings", False),
        )
