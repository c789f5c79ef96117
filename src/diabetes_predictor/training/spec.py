from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


FamilyName = Literal["logistic_regression", "decision_tree", "random_forest"]
ScoringName = Literal["neg_log_loss", "accuracy", "roc_auc"]


class TrainingSpec(BaseModel):
    """
    A full training run = dataset + candidate families + resampling controls.
    """

    name: str = Field(default="diabetes", description="Human-readable name for the run.")
    dataset_path: str = Field(..., description="Path to the BRFSS indicators CSV.")
    model_path: str = Field(
        default="final_model.pkl",
        description="Where the selected pipeline is pickled; a .meta.json sidecar is written next to it.",
    )
    report_path: Optional[str] = Field(
        default=None, description="Optional path for the training report JSON."
    )

    families: List[FamilyName] = Field(
        default_factory=lambda: ["logistic_regression", "decision_tree", "random_forest"],
        min_length=1,
    )
    grids: Dict[str, Dict[str, List[Any]]] = Field(
        default_factory=dict,
        description="Per-family parameter grid overrides, keyed like sklearn "
        "pipeline params, e.g. {'random_forest': {'model__max_features': [2, 3]}}.",
    )

    test_size: float = Field(default=0.3, gt=0.0, lt=1.0)
    cv_folds: int = Field(default=5, ge=2, le=20)
    scoring: ScoringName = "neg_log_loss"
    seed: int = Field(default=42, description="Random seed for reproducibility.")
    n_jobs: int = Field(default=1, description="Parallel jobs for the grid search.")

    @model_validator(mode="after")
    def _validate_grids(self) -> "TrainingSpec":
        unknown = sorted(set(self.grids) - set(self.families))
        if unknown:
            raise ValueError(
                f"Grid overrides given for families not being trained: {unknown}"
            )
        if len(set(self.families)) != len(self.families):
            raise ValueError("families must not contain duplicates")
        return self


def load_training_spec(data: Dict[str, Any]) -> TrainingSpec:
    return TrainingSpec.model_validate(data)


def load_training_spec_file(path: str | Path) -> TrainingSpec:
    return load_training_spec(json.loads(Path(path).read_text(encoding="utf-8")))
