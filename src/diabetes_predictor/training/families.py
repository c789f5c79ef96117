"""Candidate classifier families and the shared preprocessing step.

Every family is wrapped in the same preprocessing so the one-hot layout is
fixed by the registry levels, never by whatever levels a sample happens to
contain.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from sklearn.compose import ColumnTransformer
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler
from sklearn.tree import DecisionTreeClassifier

from diabetes_predictor.registry import CONTINUOUS_FEATURES, FEATURE_VARIABLES


@dataclass(frozen=True)
class ModelFamily:
    name: str
    build: Callable[[int], Any]
    default_grid: Dict[str, List[Any]] = field(default_factory=dict)


def build_preprocessor() -> ColumnTransformer:
    categorical = [v.name for v in FEATURE_VARIABLES]
    return ColumnTransformer(
        transformers=[
            (
                "cat",
                OneHotEncoder(
                    categories=[list(v.labels) for v in FEATURE_VARIABLES],
                    handle_unknown="error",
                ),
                categorical,
            ),
            ("num", StandardScaler(), list(CONTINUOUS_FEATURES)),
        ]
    )


def _logistic(seed: int) -> LogisticRegression:
    return LogisticRegression(max_iter=2000, random_state=seed)


def _tree(seed: int) -> DecisionTreeClassifier:
    return DecisionTreeClassifier(random_state=seed)


def _forest(seed: int) -> RandomForestClassifier:
    return RandomForestClassifier(n_estimators=200, random_state=seed)


FAMILIES: Dict[str, ModelFamily] = {
    "logistic_regression": ModelFamily(
        name="logistic_regression",
        build=_logistic,
        default_grid={"model__C": [0.01, 0.1, 1.0, 10.0]},
    ),
    "decision_tree": ModelFamily(
        name="decision_tree",
        build=_tree,
        default_grid={
            "model__max_depth": [3, 5, 10],
            "model__ccp_alpha": [0.0, 0.0001, 0.001],
        },
    ),
    "random_forest": ModelFamily(
        name="random_forest",
        build=_forest,
        default_grid={
            "model__max_features": ["sqrt", 0.25, 0.5],
            "model__min_samples_leaf": [1, 10],
        },
    ),
}


def get_family(name: str) -> ModelFamily:
    if name not in FAMILIES:
        raise KeyError(f"Unknown model family: '{name}'. Available: {sorted(FAMILIES)}")
    return FAMILIES[name]


def build_pipeline(name: str, seed: int = 42) -> Pipeline:
    family = get_family(name)
    return Pipeline(steps=[
        ("preprocess", build_preprocessor()),
        ("model", family.build(seed)),
    ])
