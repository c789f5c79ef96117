"""Configuration for the prediction service.

All configuration is read from environment variables so the same image can
be pointed at a different dataset snapshot or model artifact.
"""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path


class Settings:
    """Application settings derived from environment variables."""

    @property
    def data_path(self) -> str:
        return os.getenv(
            "DIABETES_DATA_PATH", "data/diabetes_binary_health_indicators_BRFSS2015.csv"
        )

    @property
    def model_path(self) -> str:
        return os.getenv("DIABETES_MODEL_PATH", "final_model.pkl")

    @property
    def log_level(self) -> str:
        return os.getenv("DIABETES_LOG_LEVEL", "INFO").upper()

    @property
    def author_name(self) -> str:
        return os.getenv("DIABETES_INFO_NAME", "Mike Keating")

    @property
    def author_link(self) -> str:
        return os.getenv(
            "DIABETES_INFO_LINK", "https://github.com/mike-keating-iv/st558-final-project"
        )

    @property
    def cors_origins(self) -> list[str]:
        """Comma-separated DIABETES_CORS_ORIGINS, plus the local API origin."""
        raw = os.getenv("DIABETES_CORS_ORIGINS", "")
        return ["http://localhost:8000"] + [o.strip() for o in raw.split(",") if o.strip()]

    def validate_startup(self) -> None:
        """Fail fast when the dataset snapshot or model artifact is missing."""
        missing: list[str] = []
        if not Path(self.data_path).exists():
            missing.append(f"DIABETES_DATA_PATH={self.data_path}")
        if not Path(self.model_path).exists():
            missing.append(f"DIABETES_MODEL_PATH={self.model_path}")

        if missing:
            raise RuntimeError(
                "Startup configuration error: files not found: " + ", ".join(missing)
            )


@lru_cache
def get_settings() -> Settings:
    return Settings()
