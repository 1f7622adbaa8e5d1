"""View building, serialization and request parsing helpers for the matrix API routes."""

from __future__ import annotations

import math
from typing import Any, Mapping

from config.settings import TREND_CSS_CLASSES
from core.drag import DRAG_KINDS, KIND_ROW, DropTarget
from core.matrix import IndicatorMatrix, Row
from core.patterns import PatternCard
from core.trend import color_series
from ui.models import CellViewModel, MatrixViewModel, RowViewModel, SectionViewModel


class RequestError(ValueError):
    """Malformed request body; mapped to HTTP 400 by the app."""


def parse_int(raw_value: Any, default: int, min_value: int, max_value: int) -> int:
    """Parse bounded int from request args."""
    try:
        value = int(raw_value) if raw_value is not None else default
    except (TypeError, ValueError):
        value = default
    return max(min_value, min(max_value, value))


def require_index(body: Mapping[str, Any], key: str) -> int:
    """Read a list index from a JSON body. Range checks stay with the model."""
    raw_value = body.get(key)
    if isinstance(raw_value, bool) or not isinstance(raw_value, (int, str)):
        raise RequestError(f"'{key}' must be an integer")
    try:
        return int(raw_value)
    except ValueError as exc:
        raise RequestError(f"'{key}' must be an integer") from exc


def parse_drop_target(body: Mapping[str, Any]) -> DropTarget:
    kind = body.get("kind")
    if kind not in DRAG_KINDS:
        raise RequestError("'kind' must be 'row' or 'section'")
    section_id = body.get("section_id")
    if section_id is not None and not isinstance(section_id, str):
        raise RequestError("'section_id' must be a string")
    return DropTarget(kind=kind, index=require_index(body, "index"), section_id=section_id if kind == KIND_ROW else None)


def _plain_value(value: Any) -> Any:
    """JSON-safe cell value; NaN becomes None."""
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def build_row_view(matrix: IndicatorMatrix, row: Row) -> RowViewModel:
    classes = color_series(row.series)
    cells = [
        CellViewModel(
            date=point.date,
            value=_plain_value(point.value),
            formatted_value=row.formatter(point.value),
            color_class=color_class,
        )
        for point, color_class in zip(row.series.points, classes)
    ]
    return RowViewModel(
        id=row.id,
        label=row.label,
        color=row.color,
        expanded=matrix.is_expanded(row.id),
        cells=cells,
    )


def build_matrix_view(symbol: str, matrix: IndicatorMatrix, patterns: list[PatternCard] | None = None) -> MatrixViewModel:
    sections = [
        SectionViewModel(
            id=section.id,
            title=section.title,
            icon=section.icon,
            collapsed=matrix.is_collapsed(section.id),
            rows=[build_row_view(matrix, row) for row in matrix.rows(section.id)],
        )
        for section in matrix.sections()
    ]
    return MatrixViewModel(
        symbol=symbol,
        snapshot_count=matrix.snapshot_count,
        sections=sections,
        patterns=list(patterns or []),
    )


def serialize_patterns(cards: list[PatternCard]) -> list[dict[str, Any]]:
    return [
        {
            "date": card.date,
            "patterns": [
                {"name": flag.name, "label": flag.label, "sentiment": flag.sentiment}
                for flag in card.patterns
            ],
        }
        for card in cards
    ]


def serialize_matrix(view: MatrixViewModel) -> dict[str, Any]:
    """Convert the matrix view to the API payload."""
    return {
        "symbol": view.symbol,
        "snapshot_count": view.snapshot_count,
        "section_order": [section.id for section in view.sections],
        "sections": [
            {
                "id": section.id,
                "title": section.title,
                "icon": section.icon,
                "collapsed": section.collapsed,
                "row_order": [row.id for row in section.rows],
                "rows": [
                    {
                        "id": row.id,
                        "label": row.label,
                        "color": row.color,
                        "expanded": row.expanded,
                        "cells": [
                            {
                                "date": cell.date,
                                "value": cell.value,
                                "formatted_value": cell.formatted_value,
                                "color_class": cell.color_class,
                                "css_class": TREND_CSS_CLASSES[cell.color_class],
                            }
                            for cell in row.cells
                        ],
                    }
                    for row in section.rows
                ],
            }
            for section in view.sections
        ],
        "patterns": serialize_patterns(view.patterns),
    }
