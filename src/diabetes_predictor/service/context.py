from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from diabetes_predictor.datasets.loaders import LoadedDataset, load_diabetes_csv
from diabetes_predictor.defaults import DefaultsTable, compute_defaults
from diabetes_predictor.encoding import CanonicalRow, encode_row
from diabetes_predictor.model.adapter import SklearnPredictor
from diabetes_predictor.model.protocol import Predictor
from diabetes_predictor.model.sources import ModelSourcePickle

from .config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Prediction:
    label: str
    row: CanonicalRow


@dataclass(frozen=True)
class ServingContext:
    """Everything a request needs; built once at startup, read-only afterwards."""

    dataset: LoadedDataset
    defaults: DefaultsTable
    predictor: Predictor
    info: Mapping[str, str]

    def resolve(self, supplied: Mapping[str, Any]) -> CanonicalRow:
        """Fill omitted fields from the defaults, then encode."""
        return encode_row(self.defaults.fill(supplied))

    def predict(self, supplied: Mapping[str, Any]) -> Prediction:
        row = self.resolve(supplied)
        return Prediction(label=self.predictor.predict(row), row=row)


def build_context(settings: Settings) -> ServingContext:
    dataset = load_diabetes_csv(settings.data_path)
    defaults = compute_defaults(dataset.frame)
    predictor = SklearnPredictor(ModelSourcePickle(settings.model_path))
    logger.info(
        "Serving %s model with defaults derived from %d rows",
        predictor.metadata.model_family,
        dataset.n_rows,
    )
    return ServingContext(
        dataset=dataset,
        defaults=defaults,
        predictor=predictor,
        info={"name": settings.author_name, "link": settings.author_link},
    )
