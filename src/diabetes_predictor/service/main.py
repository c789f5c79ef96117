"""FastAPI application serving diabetes predictions."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diabetes_predictor import __version__

from .config import Settings, get_settings
from .context import ServingContext, build_context
from .contracts import HealthResponse
from .routers import predictions
from .routers.predictions import get_context


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[ServingContext] = None,
) -> FastAPI:
    """Build the app; *context* skips startup loading (used by tests)."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is None:
            settings.validate_startup()
            app.state.context = build_context(settings)
        else:
            app.state.context = context
        yield
        app.state.context = None

    app = FastAPI(
        title="Diabetes Prediction API",
        description="Predict whether a person has diabetes by querying the selected classifier.",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(predictions.router)

    @app.get("/health", response_model=HealthResponse)
    async def health(ctx: ServingContext = Depends(get_context)) -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            model_family=ctx.predictor.metadata.model_family,
            n_rows=ctx.dataset.n_rows,
        )

    return app
