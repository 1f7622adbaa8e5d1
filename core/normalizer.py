"""Align ragged per-date snapshots into one value sequence per indicator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from core.accessors import Accessor, Snapshot


@dataclass(frozen=True)
class IndicatorPoint:
    """One date's value for one indicator; value is None when the snapshot lacked it."""

    date: str
    value: Any


@dataclass(frozen=True)
class IndicatorSeries:
    """Indicator values aligned one-to-one with the input snapshots (most-recent-first)."""

    indicator_id: str
    points: tuple[IndicatorPoint, ...]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def values(self) -> list[Any]:
        return [point.value for point in self.points]

    @property
    def dates(self) -> list[str]:
        return [point.date for point in self.points]

    def has_values(self) -> bool:
        """True when at least one snapshot exposed this indicator."""
        return any(point.value is not None for point in self.points)


def _safe_read(accessor: Accessor, snapshot: Snapshot) -> Any:
    try:
        return accessor(snapshot)
    except (KeyError, IndexError, TypeError, AttributeError):
        return None


def build_series(indicator_id: str, snapshots: Sequence[Snapshot], accessor: Accessor) -> IndicatorSeries:
    """Evaluate the accessor against every snapshot, preserving input order and length."""
    points = tuple(
        IndicatorPoint(date=str(snapshot.get("date", "")), value=_safe_read(accessor, snapshot))
        for snapshot in snapshots
    )
    return IndicatorSeries(indicator_id=indicator_id, points=points)


def indicator_present(snapshots: Sequence[Snapshot], accessor: Accessor) -> bool:
    """Existence check: does any snapshot expose a defined value for this accessor."""
    return any(_safe_read(accessor, snapshot) is not None for snapshot in snapshots)
