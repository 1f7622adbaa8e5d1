"""Cell value formatters for the indicator matrix."""

from __future__ import annotations

from typing import Any, Callable

import pandas as pd

from config.settings import NA_TEXT

Formatter = Callable[[Any], str]


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_float(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(number):
        return None
    return number


def format_number(value: Any) -> str:
    """Two-decimal rendering; strings pass through unchanged."""
    if _is_missing(value):
        return NA_TEXT
    if isinstance(value, str):
        return value
    number = _as_float(value)
    if number is None:
        return NA_TEXT
    return f"{number:.2f}"


def format_volume(value: Any) -> str:
    """Thousands-separated rendering for share counts and volume lines."""
    if _is_missing(value):
        return NA_TEXT
    if isinstance(value, str):
        return value
    number = _as_float(value)
    if number is None:
        return NA_TEXT
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def format_text(value: Any) -> str:
    if _is_missing(value) or value == "":
        return NA_TEXT
    return str(value)
