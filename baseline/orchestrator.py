"""Per-story decision flow: pick the target, choose feature ids, summarize."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
import logging

from .analyzer import FRONT_ENDS
from .constants import DEFAULT_BASELINE_TARGET
from .dataset import FeatureDataset, get_default_dataset
from .feature_map import detect_features
from .model import (
    AnalysisResult,
    BaselineStatusSummary,
    ExtractedStyleFragment,
    StoryParameters,
    SummaryEventPayload,
    SummarySource,
)
from .summary import compute_baseline_summary, meets_target

LOGGER = logging.getLogger(__name__)

_SELECTED_TARGET: ContextVar[str | None] = ContextVar("pybaseline_selected_target", default=None)

SummaryEmitter = Callable[[SummaryEventPayload], None]


def get_selected_target() -> str | None:
    """Return the process-wide target chosen by the host toolbar, if any."""
    return _SELECTED_TARGET.get()


def set_selected_target(target: str | None) -> None:
    _SELECTED_TARGET.set(target)


@contextmanager
def use_selected_target(target: str | None) -> Iterator[None]:
    """Select a target for every evaluation run inside the block."""
    token = _SELECTED_TARGET.set(target)
    try:
        yield
    finally:
        _SELECTED_TARGET.reset(token)


def resolve_target(parameters: StoryParameters, selected_target: str | None = None) -> str:
    if parameters.target:
        return parameters.target
    if selected_target:
        return selected_target
    return get_selected_target() or DEFAULT_BASELINE_TARGET


@dataclass
class DetectionReport:
    """Everything auto-detection found for one story."""

    feature_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    fragments: list[ExtractedStyleFragment] = field(default_factory=list)

    def merge(self, result: AnalysisResult, dataset: FeatureDataset) -> None:
        detection = detect_features(result, dataset)
        for feature_id in detection.feature_ids:
            if feature_id not in self.feature_ids:
                self.feature_ids.append(feature_id)
        self.errors.extend(result.errors)
        self.errors.extend(detection.errors)
        self.fragments.extend(result.extracted_styles)


def detect_for_parameters(
    parameters: StoryParameters,
    dataset: FeatureDataset,
    source_path: str = "story",
    *,
    jsx: bool = True,
) -> DetectionReport:
    """Run every enabled front-end over the story's sources, in a fixed order."""
    report = DetectionReport()
    css_in_js = parameters.css_in_js

    if parameters.auto_detect:
        for index, css_text in enumerate(parameters.css):
            name = source_path if len(parameters.css) == 1 else f"{source_path}[{index}]"
            report.merge(FRONT_ENDS["css"](css_text, name), dataset)

    if parameters.js_source and parameters.auto_detect_js and css_in_js.enabled:
        result = FRONT_ENDS["js"](
            parameters.js_source,
            source_path,
            libraries=css_in_js.libraries,
            ignore_interpolations=css_in_js.ignore_interpolations,
            jsx=jsx,
        )
        report.merge(result, dataset)

    if parameters.vue_source and parameters.auto_detect_vue:
        report.merge(FRONT_ENDS["vue"](parameters.vue_source, source_path), dataset)

    if parameters.angular_source and parameters.auto_detect_angular:
        report.merge(
            FRONT_ENDS["angular"](parameters.angular_source, source_path),
            dataset,
        )

    return report


def build_warning(summary: BaselineStatusSummary | None) -> str | None:
    if summary is None or not summary.non_compliant_count:
        return None
    names = ", ".join(
        usage.name
        for usage in summary.features
        if not meets_target(usage.baseline, summary.threshold)
    )
    noun = "feature" if summary.non_compliant_count == 1 else "features"
    return (
        f"{summary.non_compliant_count} {noun} not in Baseline {summary.target}: {names}"
    )


def evaluate_story(
    story_id: str,
    parameters: StoryParameters | Mapping[str, object] | None,
    *,
    selected_target: str | None = None,
    dataset: FeatureDataset | None = None,
    emit: SummaryEmitter | None = None,
    source_path: str | None = None,
    jsx: bool = True,
) -> SummaryEventPayload:
    """Evaluate one story's configuration and return the summary payload.

    Manual ``features`` always win; auto-detection still runs so its counts
    and advisories are reported alongside.
    """
    if not isinstance(parameters, StoryParameters):
        parameters = StoryParameters.from_mapping(parameters)
    features = dataset if dataset is not None else get_default_dataset()
    target = resolve_target(parameters, selected_target)

    report = detect_for_parameters(parameters, features, source_path or story_id, jsx=jsx)
    source: SummarySource
    if parameters.features:
        used = list(parameters.features)
        source = "manual"
    elif report.feature_ids:
        used = list(report.feature_ids)
        source = "auto"
    else:
        used = []
        source = "none"

    summary = compute_baseline_summary(used, target, features)

    warning = None
    if parameters.warn_on_non_baseline and not parameters.ignore_warnings:
        warning = build_warning(summary)
        if warning:
            LOGGER.warning("Story %s: %s", story_id, warning)

    payload = SummaryEventPayload(
        story_id=story_id,
        target=target,
        annotated_count=len(parameters.features),
        detected_count=len(report.feature_ids),
        source=source,
        features=tuple(used),
        summary=summary,
        errors=tuple(report.errors),
        warning=warning,
        fragments=tuple(report.fragments) if parameters.css_in_js.show_source else (),
    )
    if emit is not None:
        emit(payload)
    return payload
