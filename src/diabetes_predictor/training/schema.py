from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class FamilyResult(BaseModel):
    """
    Cross-validation and held-out results for one tuned family.
    """

    family: str
    best_params: Dict[str, Any] = Field(default_factory=dict)
    cv_score: float = Field(..., description="Mean CV score of the best configuration (greater is better).")
    cv_std: float
    test_log_loss: float
    test_accuracy: float
    test_roc_auc: Optional[float] = None


class TrainingReport(BaseModel):
    """
    Single authoritative output JSON for one training run.
    """

    schema_version: str = "0.1"
    name: str
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    dataset_path: str
    n_rows: int
    n_train: int
    n_test: int
    scoring: str
    cv_folds: int
    seed: int

    families: List[FamilyResult] = Field(default_factory=list)
    selected_family: str
    model_path: str

    def selected(self) -> FamilyResult:
        for result in self.families:
            if result.family == self.selected_family:
                return result
        raise KeyError(self.selected_family)

    def to_pretty_json(self) -> str:
        return self.model_dump_json(indent=2)
