from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np
import pandas as pd

from diabetes_predictor.encoding import encode_frame
from diabetes_predictor.errors import DatasetLoadFailure
from diabetes_predictor.registry import CONTINUOUS_FEATURES, FEATURE_COLUMNS, FEATURE_VARIABLES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefaultsTable:
    """Fallback value per feature: modal label, or the mean for BMI."""

    values: Mapping[str, Any]

    def __post_init__(self) -> None:
        missing = [c for c in FEATURE_COLUMNS if c not in self.values]
        if missing:
            raise ValueError(f"DefaultsTable missing entries for: {missing}")
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def as_dict(self) -> dict[str, Any]:
        return {c: self.values[c] for c in FEATURE_COLUMNS}

    def fill(self, partial: Mapping[str, Any]) -> dict[str, Any]:
        """Return a full row: supplied values win, absent or None fields are defaulted."""
        row = dict(partial)
        for col in FEATURE_COLUMNS:
            if row.get(col) is None:
                row[col] = self.values[col]
        return row


def _mode_label(series: pd.Series) -> str:
    # Categories are in code order, so argmax() resolves ties to the lowest code.
    categories = series.cat.categories
    codes = series.cat.codes.to_numpy()
    counts = np.bincount(codes[codes >= 0], minlength=len(categories))
    if counts.max() == 0:
        raise DatasetLoadFailure(f"No observed values for {series.name}; cannot derive a default.")
    return str(categories[int(np.argmax(counts))])


def compute_defaults(dataset: pd.DataFrame) -> DefaultsTable:
    """Derive the DefaultsTable from a dataset snapshot (raw codes or labels)."""
    encoded = encode_frame(dataset)
    values: dict[str, Any] = {}
    for variable in FEATURE_VARIABLES:
        values[variable.name] = _mode_label(encoded[variable.name])
    for name in CONTINUOUS_FEATURES:
        mean = float(encoded[name].mean(skipna=True))
        if math.isnan(mean):
            raise DatasetLoadFailure(f"No observed values for {name}; cannot derive a default.")
        values[name] = mean

    table = DefaultsTable(values=values)
    logger.info("Derived defaults from %d rows: %s", len(encoded), table.as_dict())
    return table
