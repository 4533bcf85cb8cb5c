"""Read-only access to the web-features dataset."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
import json
import logging
import os
from pathlib import Path
from typing import Any

from .constants import DEFAULT_TIMEOUT_SECONDS, FEATURES_DATA_ENV, FEATURES_DATA_URL
from .exceptions import DatasetError
from .http import fetch_json
from .model import BaselineRawStatus

LOGGER = logging.getLogger(__name__)


class FeatureDataset:
    """Feature id -> web-features entry lookup.

    Entries follow the ``web-features/data.json`` shape: ``kind``, ``name``,
    ``description`` and ``status`` with ``baseline`` and ``support``.
    """

    def __init__(self, features: Mapping[str, Any], *, origin: str = "<memory>") -> None:
        self._features = dict(features)
        self.origin = origin

    def __len__(self) -> int:
        return len(self._features)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._features

    @classmethod
    def from_mapping(cls, document: Mapping[str, Any], *, origin: str = "<memory>") -> FeatureDataset:
        """Build a dataset from a data.json document or a bare id->entry mapping."""
        if not isinstance(document, Mapping):
            raise DatasetError(origin, cause="document is not an object")
        features = document.get("features", document)
        if not isinstance(features, Mapping):
            raise DatasetError(origin, cause="'features' is not an object")
        return cls(features, origin=origin)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> FeatureDataset:
        origin = str(path)
        try:
            document = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as exc:
            raise DatasetError(origin, cause=exc.__class__.__name__) from exc
        except json.JSONDecodeError as exc:
            raise DatasetError(origin, cause="invalid JSON") from exc
        return cls.from_mapping(document, origin=origin)

    @classmethod
    def from_url(cls, url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> FeatureDataset:
        return cls.from_mapping(fetch_json(url, timeout=timeout), origin=url)

    def entry(self, feature_id: str) -> Mapping[str, Any] | None:
        value = self._features.get(feature_id)
        return value if isinstance(value, Mapping) else None

    def is_known_feature(self, feature_id: str) -> bool:
        entry = self.entry(feature_id)
        return entry is not None and entry.get("kind") == "feature"

    def feature_name(self, feature_id: str) -> str:
        entry = self.entry(feature_id)
        name = entry.get("name") if entry is not None else None
        return name if isinstance(name, str) and name else feature_id

    def description(self, feature_id: str) -> str | None:
        entry = self.entry(feature_id)
        description = entry.get("description") if entry is not None else None
        return description if isinstance(description, str) and description else None

    def _status(self, feature_id: str) -> Mapping[str, Any]:
        entry = self.entry(feature_id)
        status = entry.get("status") if entry is not None else None
        return status if isinstance(status, Mapping) else {}

    def baseline(self, feature_id: str) -> BaselineRawStatus:
        """Return high/low, treating false, null and anything else as None."""
        value = self._status(feature_id).get("baseline")
        if value == "high" or value == "low":
            return value
        return None

    def browsers(self, feature_id: str) -> tuple[str, ...]:
        support = self._status(feature_id).get("support")
        if not isinstance(support, Mapping):
            return ()
        return tuple(str(browser) for browser in support)


@lru_cache(maxsize=1)
def get_default_dataset() -> FeatureDataset:
    """Load the process-wide dataset once, from $BASELINE_FEATURES_DATA or the CDN."""
    path = os.environ.get(FEATURES_DATA_ENV, "").strip()
    if path:
        LOGGER.debug("Loading web-features data from %s", path)
        return FeatureDataset.from_path(path)
    LOGGER.debug("Downloading web-features data from %s", FEATURES_DATA_URL)
    return FeatureDataset.from_url(FEATURES_DATA_URL)
