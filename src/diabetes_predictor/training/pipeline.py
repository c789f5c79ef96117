from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import sklearn
from sklearn.base import clone
from sklearn.metrics import accuracy_score, log_loss, roc_auc_score
from sklearn.model_selection import GridSearchCV, StratifiedKFold, train_test_split

from diabetes_predictor.datasets.loaders import LoadedDataset, load_diabetes_csv
from diabetes_predictor.errors import DatasetLoadFailure
from diabetes_predictor.model.metadata import ModelMetadata
from diabetes_predictor.model.sources import save_model
from diabetes_predictor.registry import TARGET_VARIABLE
from diabetes_predictor.training.families import build_pipeline, get_family
from diabetes_predictor.training.schema import FamilyResult, TrainingReport
from diabetes_predictor.training.spec import TrainingSpec

logger = logging.getLogger(__name__)

POSITIVE_LABEL = TARGET_VARIABLE.labels[1]


def _jsonable_params(params: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in params.items():
        if isinstance(v, np.generic):
            v = v.item()
        out[k] = v
    return out


def _evaluate(model: Any, X_test: pd.DataFrame, y_test: pd.Series) -> dict[str, float | None]:
    proba = np.asarray(model.predict_proba(X_test))
    classes = list(model.classes_)
    y_pred = model.predict(X_test)
    roc = None
    if POSITIVE_LABEL in classes and y_test.nunique() == 2:
        pos = proba[:, classes.index(POSITIVE_LABEL)]
        roc = float(roc_auc_score((y_test == POSITIVE_LABEL).astype(int), pos))
    return {
        "log_loss": float(log_loss(y_test, proba, labels=classes)),
        "accuracy": float(accuracy_score(y_test, y_pred)),
        "roc_auc": roc,
    }


def _prepare(ds: LoadedDataset) -> tuple[pd.DataFrame, pd.Series]:
    complete = ds.complete_cases()
    dropped = ds.n_rows - complete.n_rows
    if dropped:
        logger.warning("Dropped %d rows with missing values", dropped)
    y = complete.y
    if y is None:
        raise DatasetLoadFailure(f"Dataset {ds.source} has no '{TARGET_VARIABLE.name}' column")
    y = y.astype(str)
    if y.nunique() < 2:
        raise DatasetLoadFailure(
            f"Need both target classes to train. Found: {sorted(y.unique())}"
        )
    return complete.X, y


def tune_family(
    name: str,
    X_train: pd.DataFrame,
    y_train: pd.Series,
    spec: TrainingSpec,
) -> GridSearchCV:
    """Grid-search one family with stratified k-fold CV on the training split."""
    family = get_family(name)
    grid = spec.grids.get(name, family.default_grid)
    cv = StratifiedKFold(n_splits=spec.cv_folds, shuffle=True, random_state=spec.seed)
    gs = GridSearchCV(
        build_pipeline(name, seed=spec.seed),
        param_grid=grid,
        scoring=spec.scoring,
        cv=cv,
        n_jobs=spec.n_jobs,
    )
    gs.fit(X_train, y_train)
    return gs


def train(spec: TrainingSpec) -> TrainingReport:
    """
    Load -> recode -> split -> tune each family -> select -> refit on all rows -> persist.

    Selection uses the mean cross-validation score on the training split;
    the held-out split is only reported.
    """
    ds = load_diabetes_csv(spec.dataset_path, require_target=True)
    X, y = _prepare(ds)

    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=spec.test_size, random_state=spec.seed, stratify=y
    )

    results: list[FamilyResult] = []
    searches: dict[str, GridSearchCV] = {}
    for name in spec.families:
        gs = tune_family(name, X_train, y_train, spec)
        searches[name] = gs
        idx = gs.best_index_
        scores = _evaluate(gs.best_estimator_, X_test, y_test)
        result = FamilyResult(
            family=name,
            best_params=_jsonable_params(gs.best_params_),
            cv_score=float(gs.best_score_),
            cv_std=float(gs.cv_results_["std_test_score"][idx]),
            test_log_loss=scores["log_loss"],
            test_accuracy=scores["accuracy"],
            test_roc_auc=scores["roc_auc"],
        )
        logger.info(
            "%s: cv %s=%.4f (+/- %.4f), test log_loss=%.4f accuracy=%.4f",
            name, spec.scoring, result.cv_score, result.cv_std,
            result.test_log_loss, result.test_accuracy,
        )
        results.append(result)

    best = max(results, key=lambda r: r.cv_score)
    logger.info("Selected %s", best.family)

    final = clone(searches[best.family].best_estimator_)
    final.fit(X, y)

    metadata = ModelMetadata(
        model_family=best.family,
        model_class=final.__class__.__name__,
        cv_metric=spec.scoring,
        cv_score=best.cv_score,
        params=best.best_params,
        versions={
            "scikit_learn": sklearn.__version__,
            "pandas": pd.__version__,
            "numpy": np.__version__,
        },
    )
    model_path = save_model(final, spec.model_path, metadata)

    report = TrainingReport(
        name=spec.name,
        dataset_path=ds.source,
        n_rows=int(len(X)),
        n_train=int(len(X_train)),
        n_test=int(len(X_test)),
        scoring=spec.scoring,
        cv_folds=spec.cv_folds,
        seed=spec.seed,
        families=results,
        selected_family=best.family,
        model_path=str(model_path),
    )
    if spec.report_path:
        p = Path(spec.report_path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(report.to_pretty_json(), encoding="utf-8")
    return report
