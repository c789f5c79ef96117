"""Pydantic contracts for the prediction API."""

from typing import Literal, Union

from pydantic import BaseModel, Field


class CanonicalInputs(BaseModel):
    """The fully defaulted, encoded row the model was queried with."""

    Age: str
    BMI: float
    Education: str
    Income: str
    NoDocbcCost: str
    PhysActivity: str


class PredictionResponse(BaseModel):
    """Response from /pred."""

    prediction: Literal["Nondiabetic", "Diabetic"] = Field(
        ..., description="Predicted Diabetes_binary label"
    )
    inputs: CanonicalInputs


class InfoResponse(BaseModel):
    name: str = Field(..., description="Author name")
    link: str = Field(..., description="Project repository")


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    model_family: str
    n_rows: int = Field(..., description="Rows in the dataset snapshot used for defaults")


class DefaultsResponse(BaseModel):
    defaults: dict[str, Union[str, float]]
