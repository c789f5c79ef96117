from .adapter import SklearnPredictor
from diabetes_predictor.errors import CapabilityError, ModelLoadError, ModelNotFittedError
from .metadata import ModelMetadata
from .protocol import Predictor
from .sources import (
    ModelSource,
    ModelSourceCallable,
    ModelSourcePickle,
    load_metadata,
    load_model,
    metadata_path,
    save_model,
)

__all__ = [
    "SklearnPredictor",
    "CapabilityError",
    "ModelLoadError",
    "ModelNotFittedError",
    "ModelMetadata",
    "Predictor",
    "ModelSource",
    "ModelSourceCallable",
    "ModelSourcePickle",
    "load_metadata",
    "load_model",
    "metadata_path",
    "save_model",
]
