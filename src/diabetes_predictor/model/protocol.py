from __future__ import annotations

from typing import Protocol

import pandas as pd

from diabetes_predictor.encoding import CanonicalRow
from diabetes_predictor.model.metadata import ModelMetadata


class Predictor(Protocol):
    """Opaque trained classifier.

    Given a CanonicalRow encoded exactly as at training time, returns one of
    the target labels ("Nondiabetic" / "Diabetic").
    """

    @property
    def metadata(self) -> ModelMetadata: ...

    def predict(self, row: CanonicalRow) -> str: ...

    def predict_frame(self, frame: pd.DataFrame) -> list[str]: ...
