"""Static CSS feature detection checked against the web-features Baseline."""

from ._version import __version__
from .dataset import FeatureDataset, get_default_dataset
from .feature_map import detect_features, map_node_to_feature_id
from .orchestrator import evaluate_story, set_selected_target, use_selected_target
from .summary import compute_baseline_summary

__all__ = [
    "FeatureDataset",
    "__version__",
    "compute_baseline_summary",
    "detect_features",
    "evaluate_story",
    "get_default_dataset",
    "map_node_to_feature_id",
    "set_selected_target",
    "use_selected_target",
]
