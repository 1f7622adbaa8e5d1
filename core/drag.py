"""Pick-up / hover / drop state machine for reordering matrix rows and sections."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any, Mapping

from core.matrix import IndicatorMatrix

logger = logging.getLogger("techmatrix.drag")

KIND_ROW = "row"
KIND_SECTION = "section"
DRAG_KINDS = frozenset({KIND_ROW, KIND_SECTION})

IDLE = "IDLE"
ARMED = "ARMED"


@dataclass
class DragSession:
    """Transient state of one reorder gesture; discarded on drop or cancel."""

    kind: str
    source_id: str
    source_index: int
    source_parent_id: str | None = None
    hover_index: int | None = None

    def payload(self) -> dict[str, Any]:
        """Gesture payload as carried by a drag transfer channel."""
        return {
            "type": self.kind,
            "id": self.source_id,
            "index": self.source_index,
            "sectionId": self.source_parent_id,
        }

    @classmethod
    def from_payload(cls, raw: str | Mapping[str, Any] | None) -> DragSession | None:
        """Rebuild a session from a transfer payload; malformed payloads give None."""
        if raw is None:
            return None
        try:
            data = json.loads(raw) if isinstance(raw, str) else dict(raw)
        except (TypeError, ValueError) as exc:
            logger.debug("Unparseable drag payload: %s", exc)
            return None
        if not isinstance(data, dict):
            return None

        kind = data.get("type")
        index = data.get("index")
        if kind not in DRAG_KINDS or not isinstance(index, int) or isinstance(index, bool):
            logger.debug("Rejected drag payload: %r", data)
            return None
        parent = data.get("sectionId")
        if kind == KIND_ROW and not isinstance(parent, str):
            logger.debug("Rejected row drag payload without section: %r", data)
            return None
        return cls(
            kind=kind,
            source_id=str(data.get("id", "")),
            source_index=index,
            source_parent_id=parent if kind == KIND_ROW else None,
        )


@dataclass(frozen=True)
class DropTarget:
    """Slot a gesture ends on; section_id is only meaningful for row slots."""

    kind: str
    index: int
    section_id: str | None = None


class DragController:
    """
    Translate reorder gestures into matrix moves.

    Idle -> Armed on pick-up, Armed -> Armed on hover, Armed -> Idle on drop
    or cancel. Hovering never mutates the matrix; only a matching drop does.
    """

    def __init__(self, matrix: IndicatorMatrix) -> None:
        self._matrix = matrix
        self._session: DragSession | None = None

    @property
    def matrix(self) -> IndicatorMatrix:
        return self._matrix

    @property
    def state(self) -> str:
        return ARMED if self._session is not None else IDLE

    @property
    def session(self) -> DragSession | None:
        return self._session

    def _source_id(self, kind: str, index: Any, section_id: str | None) -> str | None:
        if not isinstance(index, int) or isinstance(index, bool) or index < 0:
            return None
        if kind == KIND_SECTION:
            order = self._matrix.section_order
        elif kind == KIND_ROW and section_id is not None:
            order = self._matrix.row_ids(section_id)
        else:
            return None
        return order[index] if index < len(order) else None

    def pick_up(self, kind: str, index: int, section_id: str | None = None) -> DragSession | None:
        """Arm a new session; a stale or unknown source leaves the controller idle."""
        if self._session is not None:
            logger.debug("Discarding stale drag session: %r", self._session)
            self._session = None

        source_id = self._source_id(kind, index, section_id)
        if source_id is None:
            logger.debug("Pick-up ignored: kind=%r index=%r section=%r", kind, index, section_id)
            return None

        self._session = DragSession(
            kind=kind,
            source_id=source_id,
            source_index=index,
            source_parent_id=section_id if kind == KIND_ROW else None,
        )
        return self._session

    def resume(self, payload: str | Mapping[str, Any] | None) -> DragSession | None:
        """Arm from a payload carried by the gesture itself rather than by pick_up."""
        session = DragSession.from_payload(payload)
        self._session = session
        return session

    def hover(self, index: int) -> bool:
        if self._session is None:
            return False
        if not isinstance(index, int) or isinstance(index, bool):
            return False
        self._session.hover_index = index
        return True

    def drop(self, target: DropTarget) -> bool:
        """
        End the gesture on a target slot. The move applies only when the
        target kind (and, for rows, the owning section) matches the payload.
        """
        session = self._session
        self._session = None
        if session is None:
            return False

        if target.kind != session.kind:
            logger.debug("Drop rejected: %s payload on %s target", session.kind, target.kind)
            return False

        if session.kind == KIND_ROW:
            if target.section_id != session.source_parent_id:
                logger.debug(
                    "Drop rejected: row from %s dropped on %s",
                    session.source_parent_id,
                    target.section_id,
                )
                return False
            return self._matrix.move_row(session.source_parent_id, session.source_index, target.index)

        return self._matrix.move_section(session.source_index, target.index)

    def cancel(self) -> None:
        """Drag ended without a valid drop."""
        self._session = None

    end = cancel
