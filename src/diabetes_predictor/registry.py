"""Fixed categorical schema for the BRFSS diabetes indicators.

The code -> label tables below are the single source of truth for both the
training encoding and the serving encoding.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from diabetes_predictor.errors import InvalidCode


@dataclass(frozen=True)
class CategoricalVariable:
    name: str
    codes: tuple[int, ...]
    labels: tuple[str, ...]
    _by_code: Mapping[int, str] = field(init=False, repr=False, compare=False)
    _by_label: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.codes) != len(self.labels):
            raise ValueError(
                f"{self.name}: {len(self.codes)} codes but {len(self.labels)} labels"
            )
        if len(set(self.codes)) != len(self.codes):
            raise ValueError(f"{self.name}: duplicate codes")
        folded = [lbl.casefold() for lbl in self.labels]
        if len(set(folded)) != len(folded):
            raise ValueError(f"{self.name}: duplicate labels")
        object.__setattr__(
            self, "_by_code", MappingProxyType(dict(zip(self.codes, self.labels)))
        )
        object.__setattr__(
            self, "_by_label", MappingProxyType(dict(zip(folded, self.labels)))
        )

    def code_to_label(self, code: int) -> str:
        try:
            return self._by_code[code]
        except (KeyError, TypeError):
            raise InvalidCode(self.name, code, self.codes) from None

    def label_to_code(self, label: str) -> int:
        return self.codes[self.labels.index(self.canonical_label(label))]

    def canonical_label(self, label: str) -> str:
        """Return the registry spelling of *label* (matched case-insensitively)."""
        try:
            return self._by_label[label.strip().casefold()]
        except (KeyError, AttributeError):
            raise InvalidCode(self.name, label, self.labels) from None


INCOME = CategoricalVariable(
    name="Income",
    codes=tuple(range(1, 9)),
    labels=(
        "LT $10k",
        "$10-15k",
        "$15-20k",
        "$20-25k",
        "$25-35k",
        "$35-50k",
        "$50-75k",
        "GT $75k",
    ),
)


EDUCATION = CategoricalVariable(
    name="Education",
    codes=tuple(range(1, 7)),
    labels=(
        "None",
        "Elementary",
        "Some HS",
        "HS Graduate",
        "Some College",
        "College Graduate",
    ),
)


NO_DOC_BC_COST = CategoricalVariable(
    name="NoDocbcCost",
    codes=(0, 1),
    labels=("No Barrier", "Cost Barrier"),
)


PHYS_ACTIVITY = CategoricalVariable(
    name="PhysActivity",
    codes=(0, 1),
    labels=("No", "Yes"),
)


AGE = CategoricalVariable(
    name="Age",
    codes=tuple(range(1, 14)),
    labels=(
        "18-24",
        "25-29",
        "30-34",
        "35-39",
        "40-44",
        "45-49",
        "50-54",
        "55-59",
        "60-64",
        "65-69",
        "70-74",
        "75-79",
        "80 or older",
    ),
)


DIABETES_BINARY = CategoricalVariable(
    name="Diabetes_binary",
    codes=(0, 1),
    labels=("Nondiabetic", "Diabetic"),
)


# Order matches the request fields; BMI is the only continuous feature.
FEATURE_VARIABLES: tuple[CategoricalVariable, ...] = (
    AGE,
    EDUCATION,
    INCOME,
    NO_DOC_BC_COST,
    PHYS_ACTIVITY,
)
TARGET_VARIABLE = DIABETES_BINARY
CONTINUOUS_FEATURES: tuple[str, ...] = ("BMI",)

CATEGORICAL_FEATURES: tuple[str, ...] = tuple(v.name for v in FEATURE_VARIABLES)
FEATURE_COLUMNS: tuple[str, ...] = ("Age", "BMI", "Education", "Income", "NoDocbcCost", "PhysActivity")
TARGET_COLUMN = TARGET_VARIABLE.name

_VARIABLES: Mapping[str, CategoricalVariable] = MappingProxyType(
    {v.name: v for v in (*FEATURE_VARIABLES, TARGET_VARIABLE)}
)


def get_variable(name: str) -> CategoricalVariable:
    if name not in _VARIABLES:
        raise KeyError(
            f"Unknown categorical variable: '{name}'. Available: {sorted(_VARIABLES)}"
        )
    return _VARIABLES[name]


def list_variables() -> list[str]:
    return sorted(_VARIABLES)


def category_levels() -> dict[str, list[str]]:
    """Ordered label sets for every categorical feature column."""
    return {v.name: list(v.labels) for v in FEATURE_VARIABLES}
