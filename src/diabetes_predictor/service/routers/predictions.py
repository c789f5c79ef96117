"""Prediction API router: /pred, /info and /defaults."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from diabetes_predictor.errors import InvalidCode, InvalidValue, SchemaMismatch

from ..context import ServingContext
from ..contracts import CanonicalInputs, DefaultsResponse, InfoResponse, PredictionResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["predictions"])


def get_context(request: Request) -> ServingContext:
    ctx: Optional[ServingContext] = getattr(request.app.state, "context", None)
    if ctx is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Model not loaded",
        )
    return ctx


@router.get("/pred", response_model=PredictionResponse)
def predict(
    Age: Optional[str] = Query(None, description='Age group code 1-13 or label, e.g. "50-54"'),
    BMI: Optional[float] = Query(None, description="Body mass index"),
    Education: Optional[str] = Query(None, description='Code 1-6 or label, e.g. "Some College"'),
    Income: Optional[str] = Query(None, description='Code 1-8 or label, e.g. "GT $75k"'),
    NoDocbcCost: Optional[str] = Query(None, description='0/1 or "No Barrier" / "Cost Barrier"'),
    PhysActivity: Optional[str] = Query(None, description='0/1 or "No" / "Yes"'),
    ctx: ServingContext = Depends(get_context),
) -> PredictionResponse:
    """Predict Diabetes_binary for one person; omitted fields take their defaults."""
    supplied = {
        "Age": Age,
        "BMI": BMI,
        "Education": Education,
        "Income": Income,
        "NoDocbcCost": NoDocbcCost,
        "PhysActivity": PhysActivity,
    }
    try:
        result = ctx.predict(supplied)
    except (InvalidCode, InvalidValue) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except SchemaMismatch as exc:
        logger.error("Schema mismatch during prediction: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return PredictionResponse(
        prediction=result.label,
        inputs=CanonicalInputs(**result.row.as_dict()),
    )


@router.get("/info", response_model=InfoResponse)
def info(ctx: ServingContext = Depends(get_context)) -> InfoResponse:
    """Author and project link."""
    return InfoResponse(**ctx.info)


@router.get("/defaults", response_model=DefaultsResponse)
def defaults(ctx: ServingContext = Depends(get_context)) -> DefaultsResponse:
    """Values used for any omitted /pred parameter."""
    return DefaultsResponse(defaults=ctx.defaults.as_dict())
