"""Diabetes predictor: BRFSS recoding, model selection and prediction serving."""
from __future__ import annotations

__version__ = "0.1.0"

from diabetes_predictor.defaults import DefaultsTable, compute_defaults
from diabetes_predictor.encoding import CanonicalRow, encode_frame, encode_row
from diabetes_predictor.errors import DatasetLoadFailure, InvalidCode, InvalidValue, SchemaMismatch
from diabetes_predictor.registry import CategoricalVariable, get_variable
from diabetes_predictor.values import Code, Label, normalize

__all__ = [
    "__version__",
    "DefaultsTable",
    "compute_defaults",
    "CanonicalRow",
    "encode_frame",
    "encode_row",
    "DatasetLoadFailure",
    "InvalidCode",
    "InvalidValue",
    "SchemaMismatch",
    "CategoricalVariable",
    "get_variable",
    "Code",
    "Label",
    "normalize",
]
