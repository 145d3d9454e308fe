"""
Literal comparisons for the resolution agent.

Thresholds are compared exactly as written: equality at a strict
threshold is not a crossing.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

COMPARATORS = (">", ">=", "<", "<=", "=")

_COMPARATOR_ALIASES: dict[str, str] = {
    ">": ">",
    "gt": ">",
    "above": ">",
    "greater than": ">",
    "more than": ">",
    "over": ">",
    "exceeds": ">",
    ">=": ">=",
    "≥": ">=",
    "gte": ">=",
    "at least": ">=",
    "greater than or equal": ">=",
    "greater than or equal to": ">=",
    "<": "<",
    "lt": "<",
    "below": "<",
    "less than": "<",
    "under": "<",
    "<=": "<=",
    "≤": "<=",
    "lte": "<=",
    "at most": "<=",
    "less than or equal": "<=",
    "less than or equal to": "<=",
    "=": "=",
    "==": "=",
    "eq": "=",
    "equals": "=",
    "equal": "=",
    "exactly": "=",
}

_NUMBER_RE = re.compile(r"^([-+]?\d*\.?\d+)\s*([kmb])?$", re.IGNORECASE)
_SUFFIX = {"k": 1e3, "m": 1e6, "b": 1e9}

REL_TOL = 1e-9


def normalize_comparator(value: Any) -> Optional[str]:
    """Map a comparator word or symbol onto one of COMPARATORS."""
    if value is None:
        return None
    key = " ".join(str(value).strip().lower().replace("_", " ").split())
    return _COMPARATOR_ALIASES.get(key)


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a threshold like 100000, "$100,000", "95k" or "1.5M".

    Returns None when the value is not numeric.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "").replace("$", "").replace("€", "").replace("£", "")
    text = text.rstrip("%").strip()
    match = _NUMBER_RE.match(text)
    if not match:
        return None
    number = float(match.group(1))
    suffix = match.group(2)
    if suffix:
        number *= _SUFFIX[suffix.lower()]
    return number


def compare(value: float, comparator: str, threshold: float) -> bool:
    if comparator == ">":
        return value > threshold
    if comparator == ">=":
        return value >= threshold
    if comparator == "<":
        return value < threshold
    if comparator == "<=":
        return value <= threshold
    if comparator == "=":
        return math.isclose(value, threshold, rel_tol=REL_TOL, abs_tol=REL_TOL)
    raise ValueError(f"Unknown comparator: {comparator}")


def format_comparison(value: float, comparator: str, threshold: float, result: bool) -> str:
    """'98500 < 100000, so NO' style summary."""
    return f"{_fmt(value)} {comparator} {_fmt(threshold)} is {str(result).lower()}, so {'YES' if result else 'NO'}"


def _fmt(number: float) -> str:
    return f"{number:,.6f}".rstrip("0").rstrip(".")


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def fahrenheit_to_celsius(value: float) -> float:
    return (value - 32) * 5 / 9


def temperature_scale(unit: Any) -> Optional[str]:
    """'fahrenheit' / 'celsius' from free text, None when not a temperature unit."""
    text = str(unit or "").strip().lower().replace("°", "")
    if text in ("f", "fahrenheit", "degrees fahrenheit"):
        return "fahrenheit"
    if text in ("c", "celsius", "degrees celsius", "centigrade"):
        return "celsius"
    if "fahrenheit" in text:
        return "fahrenheit"
    if "celsius" in text:
        return "celsius"
    return None


def convert_temperature(value: float, from_scale: str, to_scale: str) -> float:
    if from_scale == to_scale:
        return value
    if from_scale == "celsius":
        return celsius_to_fahrenheit(value)
    return fahrenheit_to_celsius(value)


MM_PER_INCH = 25.4


def convert_precipitation(value_mm: float, unit: Any) -> float:
    """Open-Meteo reports millimetres; convert when the market asks for inches."""
    if "inch" in str(unit or "").lower() or str(unit or "").strip().lower() == "in":
        return value_mm / MM_PER_INCH
    return value_mm
