from __future__ import annotations

import hashlib
import json
import logging
import pickle
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Union

from diabetes_predictor.errors import ModelLoadError
from diabetes_predictor.model.metadata import ModelMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelSourcePickle:
    path: str


@dataclass(frozen=True)
class ModelSourceCallable:
    fn: Callable[[Any], Any]
    name: str = "anonymous"


ModelSource = Union[ModelSourcePickle, ModelSourceCallable]


def _hash_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return f"sha256:{h.hexdigest()}"


def metadata_path(model_path: str | Path) -> Path:
    """Sidecar location: ``final_model.pkl`` -> ``final_model.meta.json``."""
    p = Path(model_path)
    return p.with_name(f"{p.stem}.meta.json")


def _read_artifact(path: Path) -> Any:
    if not path.exists():
        raise ModelLoadError(f"No trained model at {path}. Run `diabetes-predictor train` first.")
    try:
        with path.open("rb") as f:
            return pickle.load(f)
    except (OSError, pickle.UnpicklingError, AttributeError, EOFError, ImportError) as exc:
        raise ModelLoadError(f"Could not unpickle model artifact {path}: {exc}") from exc


def load_model(source: ModelSource) -> tuple[Any, str | None]:
    """Return the loaded estimator and its artifact hash (None for callables)."""
    if isinstance(source, ModelSourceCallable):
        if not callable(source.fn):
            raise ModelLoadError(f"Prediction function '{source.name}' is not callable")
        return source.fn, None
    if isinstance(source, ModelSourcePickle):
        path = Path(source.path)
        return _read_artifact(path), _hash_file(path)
    raise ModelLoadError(f"Unsupported model source: {source!r}")


def load_metadata(model_path: str | Path) -> ModelMetadata | None:
    p = metadata_path(model_path)
    if not p.exists():
        return None
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
        return ModelMetadata.from_jsonable(data)
    except (ValueError, KeyError) as exc:
        raise ModelLoadError(f"Invalid model metadata {p}: {exc}") from exc


def save_model(model: Any, path: str | Path, metadata: ModelMetadata) -> Path:
    """Pickle *model* to *path* and write its metadata sidecar."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("wb") as f:
        pickle.dump(model, f)

    meta = metadata.to_jsonable()
    meta["model_hash"] = _hash_file(p)
    metadata_path(p).write_text(json.dumps(meta, indent=2), encoding="utf-8")
    logger.info("Saved %s model to %s", metadata.model_family, p)
    return p
