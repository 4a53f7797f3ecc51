"""Shared cell-coercion helpers.

Used by both the validation rules (core/rules/) and the filter evaluator
(core/filters.py) so that "is this cell empty" and "what number is this"
get the same answer everywhere.
"""

from __future__ import annotations

import json
import math
import re
from numbers import Integral, Real
from typing import Any

import pandas as pd

# Optional sign followed by digits at the start of the text; the rest is ignored.
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def is_missing(value: Any) -> bool:
    """True for None and NaN (the two ways a DataFrame spells "no value")."""
    if value is None:
        return True
    if not pd.api.types.is_scalar(value):
        return False
    return bool(pd.isna(value))


def is_blank(value: Any) -> bool:
    """True for missing values and strings that are empty after stripping."""
    if is_missing(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def parse_int(value: Any) -> int | None:
    """Parse the leading integer of *value*, e.g. ``"3.7"`` -> 3, ``"5x"`` -> 5.

    Returns None if no integer can be read, including digit runs too long
    to convert.
    """
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real):
        if math.isinf(value):
            return None
        return int(value)
    m = _LEADING_INT_RE.match(str(value))
    if m is None:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # More digits than the interpreter will convert; not a usable integer.
        return None


def to_number(value: Any) -> float:
    """Coerce a cell to a float for numeric comparison; NaN if not numeric.

    Empty text counts as 0. Missing cells are NaN, so every comparison with
    them is False.
    """
    if is_missing(value):
        return math.nan
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, Real):
        return float(value)
    text = str(value).strip()
    if text == "":
        return 0.0
    if "_" in text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def to_text(value: Any) -> str:
    """Render a cell the way it is displayed: ``4.0`` -> ``"4"``, None -> ``""``."""
    if is_missing(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def is_valid_json(text: str) -> bool:
    """Strict JSON check: NaN / Infinity literals are rejected."""
    try:
        json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return False
    return True
