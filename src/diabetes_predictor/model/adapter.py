from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

import numpy as np
import pandas as pd

from diabetes_predictor.encoding import CanonicalRow
from diabetes_predictor.errors import (
    CapabilityError,
    InvalidCode,
    ModelNotFittedError,
    SchemaMismatch,
)
from diabetes_predictor.model.metadata import ModelMetadata
from diabetes_predictor.model.sources import (
    ModelSource,
    ModelSourceCallable,
    ModelSourcePickle,
    load_metadata,
    load_model,
)
from diabetes_predictor.registry import CATEGORICAL_FEATURES, TARGET_VARIABLE

logger = logging.getLogger(__name__)


class SklearnPredictor:
    def __init__(self, source: ModelSource, *, metadata: ModelMetadata | None = None) -> None:
        self._source = source
        self._model, self._model_hash = load_model(source)
        self._ensure_fitted()
        self._metadata = self._resolve_metadata(metadata)
        logger.info(
            "Loaded %s predictor (%s)", self._metadata.model_family, self._metadata.model_class
        )

    def _ensure_fitted(self) -> None:
        if isinstance(self._source, ModelSourceCallable):
            return
        from sklearn.utils.validation import check_is_fitted

        model = self._model
        module = getattr(model, "__module__", "")
        if module.startswith("sklearn"):
            try:
                check_is_fitted(model)
            except Exception as exc:
                raise ModelNotFittedError(
                    "Model appears to be unfitted. Call fit() before serving."
                ) from exc

    def _resolve_metadata(self, metadata: ModelMetadata | None) -> ModelMetadata:
        if metadata is None and isinstance(self._source, ModelSourcePickle):
            metadata = load_metadata(self._source.path)
        if metadata is None:
            family = (
                self._source.name
                if isinstance(self._source, ModelSourceCallable)
                else "unknown"
            )
            metadata = ModelMetadata(model_family=family)
            names = getattr(self._model, "feature_names_in_", None)
            if names is not None:
                metadata = replace(metadata, feature_columns=tuple(str(n) for n in names))
        return replace(
            metadata,
            model_class=self._model.__class__.__name__,
            model_hash=self._model_hash or metadata.model_hash,
        )

    def detect_capabilities(self) -> dict[str, bool]:
        if isinstance(self._source, ModelSourceCallable):
            return {"predict": True, "predict_proba": False}
        model = self._model
        return {
            "predict": callable(getattr(model, "predict", None)),
            "predict_proba": callable(getattr(model, "predict_proba", None)),
        }

    @property
    def metadata(self) -> ModelMetadata:
        return self._metadata

    def check_schema(self, frame: pd.DataFrame) -> None:
        """Raise SchemaMismatch unless *frame* matches what the artifact was trained on."""
        expected = list(self._metadata.feature_columns)
        if sorted(frame.columns) != sorted(expected):
            raise SchemaMismatch(
                f"Column mismatch. Expected {sorted(expected)}, got {sorted(frame.columns)}"
            )
        for col in CATEGORICAL_FEATURES:
            trained = self._metadata.category_levels.get(col)
            if trained is None:
                raise SchemaMismatch(f"Artifact records no levels for '{col}'")
            series = frame[col]
            if isinstance(series.dtype, pd.CategoricalDtype):
                levels = [str(c) for c in series.cat.categories]
            else:
                levels = sorted({str(v) for v in series.dropna()})
                unknown = [v for v in levels if v not in trained]
                if unknown:
                    raise SchemaMismatch(f"Unseen levels for '{col}': {unknown}")
                continue
            if levels != list(trained):
                raise SchemaMismatch(
                    f"Level mismatch for '{col}'. Trained: {list(trained)}, got: {levels}"
                )

    def _to_label(self, value: Any) -> str:
        if isinstance(value, (str, np.str_)):
            label = str(value)
            if label not in self._metadata.class_labels:
                raise SchemaMismatch(
                    f"Model produced unknown class {label!r}. Known: {list(self._metadata.class_labels)}"
                )
            return label
        try:
            return TARGET_VARIABLE.code_to_label(int(value))
        except (InvalidCode, TypeError, ValueError) as exc:
            raise SchemaMismatch(f"Model produced unknown class {value!r}") from exc

    def predict_frame(self, frame: pd.DataFrame) -> list[str]:
        self.check_schema(frame)
        X = frame[list(self._metadata.feature_columns)]
        if isinstance(self._source, ModelSourceCallable):
            raw = self._model(X)
        else:
            if not callable(getattr(self._model, "predict", None)):
                raise CapabilityError("Model does not implement predict()")
            raw = self._model.predict(X)
        out = np.asarray(raw).ravel()
        if out.shape[0] != len(X):
            raise SchemaMismatch(f"Expected {len(X)} predictions, got {out.shape[0]}")
        return [self._to_label(v) for v in out]

    def predict(self, row: CanonicalRow) -> str:
        return self.predict_frame(row.to_frame())[0]

    def predict_proba(self, row: CanonicalRow) -> dict[str, float]:
        if not self.detect_capabilities()["predict_proba"]:
            raise CapabilityError("Model does not implement predict_proba()")
        frame = row.to_frame()
        self.check_schema(frame)
        proba = np.asarray(self._model.predict_proba(frame[list(self._metadata.feature_columns)]))[0]
        classes = getattr(self._model, "classes_", self._metadata.class_labels)
        return {self._to_label(c): float(p) for c, p in zip(classes, proba)}

