"""Reorderable section/row model of the technical indicator matrix."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Sequence

from core.accessors import Snapshot
from core.catalog import SECTION_CATALOG, SectionSpec
from core.formatters import Formatter, format_number
from core.normalizer import IndicatorSeries, build_series, indicator_present

logger = logging.getLogger("techmatrix.matrix")


@dataclass(frozen=True)
class Row:
    """One indicator's aligned series plus display metadata."""

    id: str
    label: str
    color: str
    series: IndicatorSeries
    formatter: Formatter = format_number


@dataclass
class Section:
    """A named, collapsible group of rows; row_ids holds the current order."""

    id: str
    title: str
    icon: str
    row_ids: list[str] = field(default_factory=list)


def _valid_index(index: Any, size: int) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < size


def _splice(items: list[str], from_index: int, to_index: int) -> None:
    moved = items.pop(from_index)
    items.insert(to_index, moved)


class IndicatorMatrix:
    """
    Ordered section -> row hierarchy for one snapshot sequence.

    Only the order lists and the collapse/expand flags are mutable; row data
    is fixed at build time. Move operations are total: invalid input is a
    no-op reported by a False return value.
    """

    def __init__(self, sections: Sequence[Section], rows: Sequence[Row], dates: Sequence[str] = ()) -> None:
        self._sections: dict[str, Section] = {section.id: section for section in sections}
        self._section_order: list[str] = [section.id for section in sections]
        self._rows: dict[str, Row] = {row.id: row for row in rows}
        self._collapsed: dict[str, bool] = {section.id: False for section in sections}
        self._expanded: dict[str, bool] = {row.id: False for row in rows}
        self._dates: tuple[str, ...] = tuple(dates)

    @property
    def section_order(self) -> list[str]:
        return list(self._section_order)

    @property
    def dates(self) -> list[str]:
        return list(self._dates)

    @property
    def snapshot_count(self) -> int:
        return len(self._dates)

    def is_empty(self) -> bool:
        return not self._section_order

    def section(self, section_id: str) -> Section | None:
        return self._sections.get(section_id)

    def row(self, row_id: str) -> Row | None:
        return self._rows.get(row_id)

    def sections(self) -> list[Section]:
        """Sections in current display order."""
        return [self._sections[section_id] for section_id in self._section_order]

    def row_ids(self, section_id: str) -> list[str]:
        section = self._sections.get(section_id)
        return list(section.row_ids) if section is not None else []

    def rows(self, section_id: str) -> list[Row]:
        return [self._rows[row_id] for row_id in self.row_ids(section_id)]

    def owner_of(self, row_id: str) -> str | None:
        for section_id in self._section_order:
            if row_id in self._sections[section_id].row_ids:
                return section_id
        return None

    def move_row(self, section_id: str, from_index: int, to_index: int) -> bool:
        """Splice a row to a new position inside its own section."""
        section = self._sections.get(section_id)
        if section is None:
            logger.debug("move_row ignored: unknown section %r", section_id)
            return False
        size = len(section.row_ids)
        if not (_valid_index(from_index, size) and _valid_index(to_index, size)):
            logger.debug("move_row ignored: %r -> %r out of range for %s (%d rows)", from_index, to_index, section_id, size)
            return False
        if from_index == to_index:
            return False
        _splice(section.row_ids, from_index, to_index)
        return True

    def move_section(self, from_index: int, to_index: int) -> bool:
        """Splice a section to a new position in the section order."""
        size = len(self._section_order)
        if not (_valid_index(from_index, size) and _valid_index(to_index, size)):
            logger.debug("move_section ignored: %r -> %r out of range (%d sections)", from_index, to_index, size)
            return False
        if from_index == to_index:
            return False
        _splice(self._section_order, from_index, to_index)
        return True

    def is_collapsed(self, section_id: str) -> bool:
        return self._collapsed.get(section_id, False)

    def toggle_collapse(self, section_id: str) -> bool:
        if section_id not in self._sections:
            return False
        self._collapsed[section_id] = not self._collapsed[section_id]
        return True

    def collapse_all(self) -> None:
        for section_id in self._collapsed:
            self._collapsed[section_id] = True

    def expand_all(self) -> None:
        for section_id in self._collapsed:
            self._collapsed[section_id] = False

    def is_expanded(self, row_id: str) -> bool:
        return self._expanded.get(row_id, False)

    def set_expanded(self, row_id: str, expanded: bool) -> bool:
        if row_id not in self._rows:
            return False
        self._expanded[row_id] = bool(expanded)
        return True

    def toggle_row_expanded(self, row_id: str) -> bool:
        if row_id not in self._rows:
            return False
        self._expanded[row_id] = not self._expanded[row_id]
        return True

    def layout_state(self) -> dict[str, Any]:
        """Whole presentation state (order plus flags) as one plain value."""
        return {
            "section_order": list(self._section_order),
            "row_order": {section_id: list(self._sections[section_id].row_ids) for section_id in self._section_order},
            "collapsed": dict(self._collapsed),
            "expanded": dict(self._expanded),
        }


def build_matrix(snapshots: Sequence[Snapshot], catalog: Sequence[SectionSpec] = SECTION_CATALOG) -> IndicatorMatrix:
    """
    Evaluate the catalog against a snapshot sequence.

    A section is included when any of its candidate indicators has a defined
    value in at least one snapshot. Inside an included section, conditional
    rows need their own indicator present; static rows are always kept.
    Section and row order follow catalog order.
    """
    sections: list[Section] = []
    rows: list[Row] = []
    expanded: list[str] = []

    for spec in catalog:
        present = {row_spec.id: indicator_present(snapshots, row_spec.accessor) for row_spec in spec.rows}
        if not any(present.values()):
            continue

        section = Section(id=spec.id, title=spec.title, icon=spec.icon)
        for row_spec in spec.rows:
            if row_spec.conditional and not present[row_spec.id]:
                continue
            series = build_series(row_spec.id, snapshots, row_spec.accessor)
            rows.append(
                Row(
                    id=row_spec.id,
                    label=row_spec.label,
                    color=row_spec.color,
                    series=series,
                    formatter=row_spec.formatter,
                )
            )
            section.row_ids.append(row_spec.id)
            if row_spec.default_expanded:
                expanded.append(row_spec.id)
        sections.append(section)

    dates = [str(snapshot.get("date", "")) for snapshot in snapshots]
    matrix = IndicatorMatrix(sections, rows, dates)
    for row_id in expanded:
        matrix.set_expanded(row_id, True)

    logger.info(
        "Built indicator matrix: %d snapshots, %d sections, %d rows",
        len(dates),
        len(sections),
        len(rows),
    )
    return matrix
