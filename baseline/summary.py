"""Aggregate feature ids into a baseline compliance summary."""

from __future__ import annotations

from collections.abc import Iterable

from .constants import DEFAULT_THRESHOLD, SUPPORT_LEVEL_MAP, TARGET_THRESHOLDS
from .dataset import FeatureDataset, get_default_dataset
from .model import (
    BaselineFeatureUsage,
    BaselineRawStatus,
    BaselineStatusSummary,
    SupportLevel,
    Threshold,
)


def normalize_target(target: str) -> Threshold:
    """Map a target label (``2024``, ``widely``, ``newly-available``...) to a threshold."""
    return TARGET_THRESHOLDS.get(target.strip().lower(), DEFAULT_THRESHOLD)


def to_support_level(baseline: BaselineRawStatus) -> SupportLevel:
    return SUPPORT_LEVEL_MAP.get(baseline, "not") if baseline else "not"


def meets_target(baseline: BaselineRawStatus, threshold: Threshold) -> bool:
    if baseline == "high":
        return True
    return baseline == "low" and threshold == "low"


def lookup_feature(feature_id: str, dataset: FeatureDataset) -> BaselineFeatureUsage:
    """Resolve one id; ids the dataset does not list as features report ``found=False``."""
    if not dataset.is_known_feature(feature_id):
        return BaselineFeatureUsage(
            feature_id=feature_id,
            name=feature_id,
            support="not",
            baseline=None,
            found=False,
        )
    baseline = dataset.baseline(feature_id)
    return BaselineFeatureUsage(
        feature_id=feature_id,
        name=dataset.feature_name(feature_id),
        support=to_support_level(baseline),
        baseline=baseline,
        browsers=dataset.browsers(feature_id),
        found=True,
        description=dataset.description(feature_id),
    )


def compute_baseline_summary(
    feature_ids: Iterable[str],
    target: str,
    dataset: FeatureDataset | None = None,
) -> BaselineStatusSummary | None:
    """Summarize compliance of the distinct ids against ``target``; None for no ids."""
    unique_ids = list(dict.fromkeys(feature_ids))
    if not unique_ids:
        return None

    features = dataset if dataset is not None else get_default_dataset()
    threshold = normalize_target(target)
    usages = tuple(lookup_feature(feature_id, features) for feature_id in unique_ids)
    compliant = sum(1 for usage in usages if meets_target(usage.baseline, threshold))

    return BaselineStatusSummary(
        target=target,
        threshold=threshold,
        total_count=len(usages),
        compliant_count=compliant,
        non_compliant_count=len(usages) - compliant,
        features=usages,
    )
