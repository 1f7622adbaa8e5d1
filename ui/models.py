"""UI data models for the indicator matrix view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.patterns import PatternCard


@dataclass(frozen=True)
class CellViewModel:
    """One date cell of an indicator row."""

    date: str
    value: Any
    formatted_value: str
    color_class: str


@dataclass(frozen=True)
class RowViewModel:
    id: str
    label: str
    color: str
    expanded: bool
    cells: list[CellViewModel]


@dataclass(frozen=True)
class SectionViewModel:
    id: str
    title: str
    icon: str
    collapsed: bool
    rows: list[RowViewModel]


@dataclass(frozen=True)
class MatrixViewModel:
    """Complete render payload for one symbol's indicator matrix."""

    symbol: str
    snapshot_count: int
    sections: list[SectionViewModel]
    patterns: list[PatternCard]
