"""Map structural CSS nodes to web-features identifiers."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
import re

from .constants import FRAGMENT_SEPARATOR
from .css_parser import parse_css
from .dataset import FeatureDataset, get_default_dataset
from .exceptions import CssParseError
from .model import (
    AnalysisResult,
    BaselineFeatureUsage,
    CssParseResult,
    Detection,
    NodeKind,
    StructuralFeatureNode,
)

LOGGER = logging.getLogger(__name__)

FeatureMappingRule = Callable[[StructuralFeatureNode], str | None]

DECLARATION_FEATURES: dict[str, str] = {
    "container": "container-queries",
    "container-type": "container-queries",
    "container-name": "container-queries",
    "font-size-adjust": "font-size-adjust",
    "font-variant-alternates": "font-variant-alternates",
    "backdrop-filter": "backdrop-filter",
    "filter": "filter",
    "aspect-ratio": "aspect-ratio",
    "accent-color": "accent-color",
    "color-scheme": "color-scheme",
    "content-visibility": "content-visibility",
    "overscroll-behavior": "overscroll-behavior",
    "overscroll-behavior-x": "overscroll-behavior",
    "overscroll-behavior-y": "overscroll-behavior",
    "scrollbar-gutter": "scrollbar-gutter",
    "scrollbar-width": "scrollbar-width",
    "scrollbar-color": "scrollbar-color",
    "text-wrap": "text-wrap",
    "clip-path": "clip-path",
    "object-fit": "object-fit",
    "object-position": "object-fit",
    "isolation": "isolation",
    "mix-blend-mode": "mix-blend-mode",
    "touch-action": "touch-action",
    "user-select": "user-select",
    "appearance": "appearance",
    "hyphens": "hyphens",
    "contain": "contain",
    "field-sizing": "field-sizing",
    "view-transition-name": "view-transitions",
    "anchor-name": "anchor-positioning",
    "position-anchor": "anchor-positioning",
    "offset-path": "motion-path",
    "transform": "transforms2d",
    "transform-origin": "transforms2d",
    "perspective": "transforms3d",
    "perspective-origin": "transforms3d",
    "transform-style": "transforms3d",
    "backface-visibility": "transforms3d",
    "translate": "individual-transforms",
    "rotate": "individual-transforms",
    "scale": "individual-transforms",
    "scroll-snap-type": "scroll-snap",
    "scroll-snap-align": "scroll-snap",
    "scroll-snap-stop": "scroll-snap",
    "scroll-padding": "scroll-snap",
    "scroll-margin": "scroll-snap",
    "mask": "masks",
    "mask-image": "masks",
    "mask-size": "masks",
    "mask-position": "masks",
    "mask-repeat": "masks",
    "mask-mode": "masks",
    "mask-origin": "masks",
    "mask-clip": "masks",
    "mask-composite": "masks",
    "margin-inline": "logical-properties",
    "margin-inline-start": "logical-properties",
    "margin-inline-end": "logical-properties",
    "margin-block": "logical-properties",
    "margin-block-start": "logical-properties",
    "margin-block-end": "logical-properties",
    "padding-inline": "logical-properties",
    "padding-inline-start": "logical-properties",
    "padding-inline-end": "logical-properties",
    "padding-block": "logical-properties",
    "padding-block-start": "logical-properties",
    "padding-block-end": "logical-properties",
    "inset-inline": "logical-properties",
    "inset-inline-start": "logical-properties",
    "inset-inline-end": "logical-properties",
    "inset-block": "logical-properties",
    "inset-block-start": "logical-properties",
    "inset-block-end": "logical-properties",
    "border-inline": "logical-properties",
    "border-block": "logical-properties",
    "inline-size": "logical-properties",
    "block-size": "logical-properties",
    "min-inline-size": "logical-properties",
    "max-inline-size": "logical-properties",
    "min-block-size": "logical-properties",
    "max-block-size": "logical-properties",
}

AT_RULE_FEATURES: dict[str, str] = {
    "container": "container-queries",
    "supports": "supports",
    "layer": "cascade-layers",
    "property": "at-property",
    "scope": "cascade-scope",
    "starting-style": "starting-style",
    "view-transition": "cross-document-view-transitions",
    "position-try": "anchor-positioning",
}

VALUE_FUNCTION_FEATURES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("clamp", "min", "max"), "math-functions"),
    (("color-mix",), "color-mix"),
    (("color",), "color-function"),
    (("oklab", "oklch"), "oklch-colors"),
    (("lab", "lch"), "lab-colors"),
    (("hwb",), "hwb-colors"),
)

SELECTOR_FEATURES: tuple[tuple[str, str], ...] = (
    (":has(", "has"),
    (":is(", "is"),
    (":where(", "where"),
    (":focus-visible", "focus-visible"),
    (":focus-within", "focus-within"),
    ("::backdrop", "backdrop"),
    ("::part(", "shadow-parts"),
    (":not(", "not"),
)


def _function_pattern(names: Sequence[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(name) for name in names)
    return re.compile(rf"(?<![\w-])(?:{alternatives})\(")


_VALUE_FUNCTION_PATTERNS = tuple(
    (_function_pattern(names), feature_id) for names, feature_id in VALUE_FUNCTION_FEATURES
)


def _value(node: StructuralFeatureNode) -> str:
    return (node.value or "").lower()


def _from_property_table(node: StructuralFeatureNode) -> str | None:
    return DECLARATION_FEATURES.get(node.name.lower())


def _from_display(node: StructuralFeatureNode) -> str | None:
    if node.name.lower() != "display":
        return None
    value = _value(node)
    if "grid" in value:
        return "grid"
    if "flex" in value:
        return "flexbox"
    return None


def _from_position(node: StructuralFeatureNode) -> str | None:
    if node.name.lower() == "position" and "sticky" in _value(node):
        return "sticky-positioning"
    return None


def _from_subgrid(node: StructuralFeatureNode) -> str | None:
    return "subgrid" if "subgrid" in _value(node) else None


def _from_value_function(node: StructuralFeatureNode) -> str | None:
    value = _value(node)
    for pattern, feature_id in _VALUE_FUNCTION_PATTERNS:
        if pattern.search(value):
            return feature_id
    return None


def _from_value_nesting(node: StructuralFeatureNode) -> str | None:
    return "nesting" if "&" in _value(node) else None


def _from_at_rule_table(node: StructuralFeatureNode) -> str | None:
    return AT_RULE_FEATURES.get(node.name.lower())


def _from_selector_table(node: StructuralFeatureNode) -> str | None:
    selector = node.name.lower()
    for needle, feature_id in SELECTOR_FEATURES:
        if needle in selector:
            return feature_id
    if ":nth-child(" in selector and " of " in selector:
        return "nth-child-of"
    return None


def _from_selector_nesting(node: StructuralFeatureNode) -> str | None:
    return "nesting" if "&" in node.name else None


RULES_BY_KIND: dict[NodeKind, tuple[FeatureMappingRule, ...]] = {
    "declaration": (
        _from_property_table,
        _from_display,
        _from_position,
        _from_subgrid,
        _from_value_function,
        _from_value_nesting,
    ),
    "at-rule": (_from_at_rule_table,),
    "selector": (_from_selector_table, _from_selector_nesting),
}


def map_node_to_feature_id(node: StructuralFeatureNode) -> str | None:
    """Return the first feature id produced by the rules for this node's kind."""
    for rule in RULES_BY_KIND.get(node.kind, ()):
        feature_id = rule(node)
        if feature_id:
            return feature_id
    return None


def to_feature_usages(
    parsed: CssParseResult,
    dataset: FeatureDataset | None = None,
) -> list[BaselineFeatureUsage]:
    """Collapse parsed nodes into one usage per distinct known feature id.

    Baseline status is not resolved here; every usage reports ``support="not"``
    until the summary step looks the feature up.
    """
    features = dataset if dataset is not None else get_default_dataset()
    detected: list[str] = []
    seen: set[str] = set()

    for node in parsed.nodes:
        feature_id = map_node_to_feature_id(node)
        if not feature_id or feature_id in seen:
            continue
        if not features.is_known_feature(feature_id):
            LOGGER.debug("Dropping unknown feature id %s", feature_id)
            continue
        seen.add(feature_id)
        detected.append(feature_id)

    return [
        BaselineFeatureUsage(
            feature_id=feature_id,
            name=features.feature_name(feature_id),
            support="not",
            baseline=None,
            browsers=(),
            found=True,
        )
        for feature_id in detected
    ]


def combine_fragments(result: AnalysisResult) -> str:
    """Join every extracted fragment into a single CSS text blob."""
    return FRAGMENT_SEPARATOR.join(fragment.css_text for fragment in result.extracted_styles)


def detect_features(
    result: AnalysisResult,
    dataset: FeatureDataset | None = None,
) -> Detection:
    """Parse a front-end result's CSS and return the ordered feature ids it uses."""
    if not result.extracted_styles:
        return Detection(feature_ids=[])

    features = dataset if dataset is not None else get_default_dataset()
    try:
        parsed = [parse_css(combine_fragments(result), result.source)]
        errors: list[str] = []
    except CssParseError:
        # Re-parse one fragment at a time so a broken fragment keeps its siblings.
        parsed = []
        errors = []
        for fragment in result.extracted_styles:
            try:
                parsed.append(parse_css(fragment.css_text, result.source))
            except CssParseError as exc:
                errors.append(f"Failed to parse CSS from {result.source}: {exc}")

    feature_ids: list[str] = []
    for parse_result in parsed:
        for usage in to_feature_usages(parse_result, features):
            if usage.feature_id not in feature_ids:
                feature_ids.append(usage.feature_id)
    return Detection(feature_ids=feature_ids, errors=errors)
