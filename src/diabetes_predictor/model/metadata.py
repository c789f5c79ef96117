from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from diabetes_predictor.registry import FEATURE_COLUMNS, TARGET_VARIABLE, category_levels


@dataclass(frozen=True)
class ModelMetadata:
    """What an artifact was trained against; persisted as the JSON sidecar."""

    model_family: str
    feature_columns: tuple[str, ...] = FEATURE_COLUMNS
    category_levels: dict[str, list[str]] = field(default_factory=category_levels)
    class_labels: tuple[str, ...] = TARGET_VARIABLE.labels
    model_class: str = "unknown"
    model_hash: str | None = None
    cv_metric: str | None = None
    cv_score: float | None = None
    params: dict[str, Any] = field(default_factory=dict)
    versions: dict[str, str] = field(default_factory=dict)

    def to_jsonable(self) -> dict[str, Any]:
        return {
            "model_family": self.model_family,
            "feature_columns": list(self.feature_columns),
            "category_levels": {k: list(v) for k, v in self.category_levels.items()},
            "class_labels": list(self.class_labels),
            "model_class": self.model_class,
            "model_hash": self.model_hash,
            "cv_metric": self.cv_metric,
            "cv_score": self.cv_score,
            "params": dict(self.params),
            "versions": dict(self.versions),
        }

    @classmethod
    def from_jsonable(cls, data: dict[str, Any]) -> "ModelMetadata":
        return cls(
            model_family=data["model_family"],
            feature_columns=tuple(data.get("feature_columns", FEATURE_COLUMNS)),
            category_levels={
                k: list(v) for k, v in data.get("category_levels", category_levels()).items()
            },
            class_labels=tuple(data.get("class_labels", TARGET_VARIABLE.labels)),
            model_class=data.get("model_class", "unknown"),
            model_hash=data.get("model_hash"),
            cv_metric=data.get("cv_metric"),
            cv_score=data.get("cv_score"),
            params=dict(data.get("params", {})),
            versions=dict(data.get("versions", {})),
        )
