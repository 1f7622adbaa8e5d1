"""Tri-state trend coloring of aligned indicator series."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
import pandas as pd

from config.settings import TREND_DECREASE, TREND_FLAT, TREND_INCREASE
from core.normalizer import IndicatorSeries


def _numeric(values: Sequence[Any]) -> pd.Series:
    """Coerce raw cell values to floats; booleans and non-numeric text become NaN."""
    cleaned = [None if isinstance(value, bool) else value for value in values]
    return pd.to_numeric(pd.Series(cleaned, dtype="object"), errors="coerce").astype(float)


def trend_classes(values: Sequence[Any]) -> list[str]:
    """
    Compare each value with the next element in sequence.
    Series are most-recent-first, so the next element is the chronologically
    earlier neighbor. Missing or non-numeric pairs and the last cell are flat.
    """
    if len(values) == 0:
        return []

    current = _numeric(values)
    earlier = current.shift(-1)
    classes = np.select(
        [current > earlier, current < earlier],
        [TREND_INCREASE, TREND_DECREASE],
        default=TREND_FLAT,
    )
    return [str(item) for item in classes]


def color_series(series: IndicatorSeries) -> list[str]:
    return trend_classes(series.values)
