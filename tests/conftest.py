from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest


def make_raw_frame(n: int = 400, seed: int = 0) -> pd.DataFrame:
    """Synthetic BRFSS-shaped rows using the raw numeric codes."""
    rng = np.random.default_rng(seed)
    age = rng.integers(1, 14, n)
    bmi = np.round(rng.normal(28.0, 6.0, n), 1)
    logit = -6.0 + 0.25 * age + 0.12 * bmi
    y = (rng.random(n) < 1.0 / (1.0 + np.exp(-logit))).astype(int)
    return pd.DataFrame({
        "Diabetes_binary": y,
        "HighBP": rng.integers(0, 2, n),
        "BMI": bmi,
        "PhysActivity": rng.integers(0, 2, n),
        "NoDocbcCost": rng.integers(0, 2, n),
        "Age": age,
        "Education": rng.integers(1, 7, n),
        "Income": rng.integers(1, 9, n),
    })


def write_csv(tmp_path: Path, df: pd.DataFrame, filename: str = "diabetes.csv") -> Path:
    path = tmp_path / filename
    df.to_csv(path, index=False)
    return path


SMALL_GRIDS = {
    "logistic_regression": {"model__C": [0.1, 1.0]},
    "decision_tree": {"model__max_depth": [2, 4]},
    "random_forest": {"model__n_estimators": [20], "model__max_features": ["sqrt"]},
}


@pytest.fixture
def raw_frame() -> pd.DataFrame:
    return make_raw_frame()


@pytest.fixture
def raw_csv(tmp_path: Path, raw_frame: pd.DataFrame) -> Path:
    return write_csv(tmp_path, raw_frame)


@pytest.fixture(scope="session")
def trained(tmp_path_factory):
    """Train once per session: (csv_path, model_path, report)."""
    from diabetes_predictor.training import TrainingSpec, train

    root = tmp_path_factory.mktemp("trained")
    csv_path = write_csv(root, make_raw_frame())
    spec = TrainingSpec(
        dataset_path=str(csv_path),
        model_path=str(root / "final_model.pkl"),
        report_path=str(root / "report.json"),
        grids=SMALL_GRIDS,
        cv_folds=3,
        seed=7,
    )
    report = train(spec)
    return csv_path, Path(report.model_path), report
