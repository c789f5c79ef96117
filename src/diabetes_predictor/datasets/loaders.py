from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pandas as pd

from diabetes_predictor.encoding import encode_frame
from diabetes_predictor.errors import DatasetLoadFailure, InvalidCode, InvalidValue, SchemaMismatch
from diabetes_predictor.registry import FEATURE_COLUMNS, TARGET_COLUMN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedDataset:
    frame: pd.DataFrame
    source: str

    @property
    def X(self) -> pd.DataFrame:
        return self.frame[list(FEATURE_COLUMNS)]

    @property
    def y(self) -> Optional[pd.Series]:
        if TARGET_COLUMN not in self.frame.columns:
            return None
        return self.frame[TARGET_COLUMN]

    @property
    def n_rows(self) -> int:
        return int(len(self.frame))

    def complete_cases(self) -> "LoadedDataset":
        """Rows with no missing feature (or target) values."""
        return LoadedDataset(frame=self.frame.dropna(), source=self.source)


def load_diabetes_csv(path: str | Path, *, require_target: bool = False) -> LoadedDataset:
    """Read the BRFSS indicators CSV and recode it into labeled factors.

    Only the feature columns (and ``Diabetes_binary`` when present) are kept.
    Any failure is reported as DatasetLoadFailure.
    """
    p = Path(path)
    if not p.exists():
        raise DatasetLoadFailure(f"CSV not found: {p}")

    try:
        df = pd.read_csv(p)
    except Exception as exc:
        raise DatasetLoadFailure(f"Failed to read CSV {p}: {exc}") from exc

    if require_target and TARGET_COLUMN not in df.columns:
        raise DatasetLoadFailure(
            f"Missing required column '{TARGET_COLUMN}'. Available: {list(df.columns)}"
        )
    if df.empty:
        raise DatasetLoadFailure(f"CSV has no rows: {p}")

    try:
        frame = encode_frame(df)
    except (InvalidCode, InvalidValue, SchemaMismatch) as exc:
        raise DatasetLoadFailure(f"Failed to encode {p}: {exc}") from exc

    logger.info("Loaded %d rows from %s", len(frame), p)
    return LoadedDataset(frame=frame, source=str(p))
