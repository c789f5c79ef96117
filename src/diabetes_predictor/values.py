from __future__ import annotations

import math
import re
from dataclasses import dataclass
from numbers import Integral, Real
from typing import Any, Union

from diabetes_predictor.errors import InvalidCode
from diabetes_predictor.registry import CategoricalVariable


@dataclass(frozen=True)
class Code:
    value: int


@dataclass(frozen=True)
class Label:
    value: str


CategoricalValue = Union[Code, Label]

_INT_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+)([eE][+-]?\d+)?$")


def parse_value(variable: CategoricalVariable, raw: Any) -> CategoricalValue:
    """Classify a raw input as a numeric code or a label string.

    Integers and integral floats (as numbers or numeric strings) are codes;
    any other string is a label. Anything else is rejected.
    """
    if isinstance(raw, (Code, Label)):
        return raw
    if isinstance(raw, bool):
        raise InvalidCode(variable.name, raw, variable.codes)
    if isinstance(raw, Integral):
        return Code(int(raw))
    if isinstance(raw, Real):
        f = float(raw)
        if math.isfinite(f) and f.is_integer():
            return Code(int(f))
        raise InvalidCode(variable.name, raw, variable.codes)
    if isinstance(raw, str):
        s = raw.strip()
        if _INT_RE.match(s):
            return Code(int(s))
        if _DECIMAL_RE.match(s):
            return parse_value(variable, float(s))
        return Label(s)
    raise InvalidCode(variable.name, raw, variable.labels)


def normalize(variable: CategoricalVariable, raw: Any) -> str:
    """Map a code or a label to the canonical registry label."""
    value = parse_value(variable, raw)
    if isinstance(value, Code):
        return variable.code_to_label(value.value)
    return variable.canonical_label(value.value)
