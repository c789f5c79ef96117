"""Raw survey values -> canonical labeled representation.

``encode_frame`` is the only place values are recoded; ``encode_row`` runs a
one-row frame through it so bulk (training) and single-row (serving)
encodings cannot drift apart.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

import numpy as np
import pandas as pd

from diabetes_predictor.errors import InvalidCode, InvalidValue, SchemaMismatch
from diabetes_predictor.registry import (
    CONTINUOUS_FEATURES,
    FEATURE_COLUMNS,
    FEATURE_VARIABLES,
    TARGET_VARIABLE,
    CategoricalVariable,
)
from diabetes_predictor.values import normalize


_ATTR_BY_COLUMN = {
    "Age": "age",
    "BMI": "bmi",
    "Education": "education",
    "Income": "income",
    "NoDocbcCost": "no_doc_bc_cost",
    "PhysActivity": "phys_activity",
}


@dataclass(frozen=True)
class CanonicalRow:
    age: str
    bmi: float
    education: str
    income: str
    no_doc_bc_cost: str
    phys_activity: str

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CanonicalRow":
        """Build from an already-encoded mapping keyed by column name."""
        return cls(
            **{
                attr: (float(values[col]) if col in CONTINUOUS_FEATURES else str(values[col]))
                for col, attr in _ATTR_BY_COLUMN.items()
            }
        )

    def as_dict(self) -> dict[str, Any]:
        fields = asdict(self)
        return {col: fields[attr] for col, attr in _ATTR_BY_COLUMN.items()}

    def to_frame(self) -> pd.DataFrame:
        return encode_frame(pd.DataFrame([self.as_dict()]))


def _encode_categorical(series: pd.Series, variable: CategoricalVariable) -> pd.Series:
    raw = series.astype(object)
    mapping = {value: normalize(variable, value) for value in pd.unique(raw.dropna())}
    labels = raw.map(mapping)
    return pd.Series(
        pd.Categorical(labels, categories=list(variable.labels)),
        index=series.index,
        name=variable.name,
    )


def _encode_continuous(series: pd.Series, name: str) -> pd.Series:
    out = pd.to_numeric(series, errors="coerce").astype(float)
    bad = out.isna() & series.notna()
    if bad.any():
        examples = series[bad].head(5).tolist()
        raise InvalidValue(f"{name} must be numeric. Example bad values: {examples}")
    if np.isinf(out.to_numpy()).any():
        raise InvalidValue(f"{name} contains Inf values.")
    return out.rename(name)


def encode_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Recode feature columns (and the target, when present) of *df*.

    Returns a new frame holding only the feature columns in canonical order,
    followed by the target column if *df* has one. Missing values stay
    missing; values outside a variable's code/label set raise InvalidCode.
    """
    missing = [c for c in FEATURE_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaMismatch(
            f"Missing feature columns: {missing}. Available: {list(df.columns)}"
        )

    out: dict[str, pd.Series] = {}
    for variable in FEATURE_VARIABLES:
        out[variable.name] = _encode_categorical(df[variable.name], variable)
    for name in CONTINUOUS_FEATURES:
        out[name] = _encode_continuous(df[name], name)
    if TARGET_VARIABLE.name in df.columns:
        out[TARGET_VARIABLE.name] = _encode_categorical(
            df[TARGET_VARIABLE.name], TARGET_VARIABLE
        )

    columns = list(FEATURE_COLUMNS)
    if TARGET_VARIABLE.name in out:
        columns.append(TARGET_VARIABLE.name)
    return pd.DataFrame({c: out[c] for c in columns}, index=df.index)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and np.isnan(value)


def encode_row(raw: Mapping[str, Any]) -> CanonicalRow:
    """Encode one input record; every feature field must be supplied.

    A field that is absent (or None) is a SchemaMismatch. A supplied NaN is a
    bad value: InvalidValue for BMI, InvalidCode for a categorical field.
    """
    unknown = sorted(k for k in raw if k not in FEATURE_COLUMNS)
    if unknown:
        raise SchemaMismatch(f"Unknown fields: {unknown}. Expected: {list(FEATURE_COLUMNS)}")
    absent = [c for c in FEATURE_COLUMNS if raw.get(c) is None]
    if absent:
        raise SchemaMismatch(f"Missing fields: {absent}")
    for variable in FEATURE_VARIABLES:
        if _is_nan(raw[variable.name]):
            raise InvalidCode(variable.name, raw[variable.name], variable.labels)
    for name in CONTINUOUS_FEATURES:
        if _is_nan(raw[name]):
            raise InvalidValue(f"{name} must be a number, got NaN.")

    frame = pd.DataFrame([{c: raw[c] for c in FEATURE_COLUMNS}], dtype=object)
    encoded = encode_frame(frame)
    return CanonicalRow.from_mapping(encoded.iloc[0].to_dict())
