from .families import FAMILIES, build_pipeline, build_preprocessor, get_family
from .pipeline import train, tune_family
from .schema import FamilyResult, TrainingReport
from .spec import TrainingSpec, load_training_spec, load_training_spec_file

__all__ = [
    "FAMILIES",
    "build_pipeline",
    "build_preprocessor",
    "get_family",
    "train",
    "tune_family",
    "FamilyResult",
    "TrainingReport",
    "TrainingSpec",
    "load_training_spec",
    "load_training_spec_file",
]
