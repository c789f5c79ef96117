from .config import Settings, get_settings
from .context import Prediction, ServingContext, build_context
from .main import create_app

__all__ = [
    "Settings",
    "get_settings",
    "Prediction",
    "ServingContext",
    "build_context",
    "create_app",
]
