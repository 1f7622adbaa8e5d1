"""Local Flask JSON adapter for the reorderable technical indicator matrix."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import sys
import threading
from typing import Any, Callable

from flask import Flask, got_request_exception, jsonify, request
from plotly.offline import get_plotlyjs

# Make `python ui/app.py` work without external PYTHONPATH setup.
THIS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = THIS_DIR.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from config.settings import LOGS_DIR, UI_HOST, UI_PORT
from core.data_reader import available_symbols, normalize_symbol, read_snapshots, snapshot_fingerprint
from core.drag import DragController
from core.matrix import IndicatorMatrix, build_matrix
from core.patterns import PatternCard, pattern_cards
from ui.api import (
    RequestError,
    build_matrix_view,
    parse_drop_target,
    parse_int,
    require_index,
    serialize_matrix,
    serialize_patterns,
)
from ui.charts import build_row_chart


UI_DIR = THIS_DIR
STATIC_DIR = UI_DIR / "static"

PLOTLY_VENDOR_RELATIVE_PATH = "vendor/plotly.min.js"
PLOTLY_VENDOR_PATH = STATIC_DIR / PLOTLY_VENDOR_RELATIVE_PATH

CHART_DEFAULT_POINTS = 60
CHART_MAX_POINTS = 500


@dataclass
class MatrixSession:
    """Live matrix, drag controller and pattern cards for one symbol."""

    symbol: str
    fingerprint: str
    matrix: IndicatorMatrix
    controller: DragController
    patterns: list[PatternCard]


def _configure_ui_logger(logs_dir: Path) -> logging.Logger:
    """Configure file logger for the UI app and the matrix domain loggers."""
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "ui.log"

    logger = logging.getLogger("techmatrix")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    existing = None
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            existing = handler
            break

    if existing is None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        logger.addHandler(handler)

    return logging.getLogger("techmatrix.ui")


def create_app(data_dir: str | Path | None = None, logs_dir: str | Path | None = None) -> Flask:
    """Create and configure the local Flask application."""
    app = Flask(__name__, static_folder=str(STATIC_DIR))
    app.config["SEND_FILE_MAX_AGE_DEFAULT"] = 86400

    logger = _configure_ui_logger(Path(logs_dir) if logs_dir is not None else Path(LOGS_DIR))
    logger.info("UI app initialized")

    if not PLOTLY_VENDOR_PATH.exists():
        try:
            PLOTLY_VENDOR_PATH.parent.mkdir(parents=True, exist_ok=True)
            PLOTLY_VENDOR_PATH.write_text(get_plotlyjs(), encoding="utf-8")
            logger.info("Wrote local Plotly bundle: %s", PLOTLY_VENDOR_PATH)
        except OSError as exc:
            logger.warning("Failed to write local Plotly bundle: %s", exc)

    state_lock = threading.RLock()
    sessions: dict[str, MatrixSession] = {}

    def _error(message: str, status_code: int):
        return jsonify({"error": message}), status_code

    def _load_session(symbol: str, refresh: bool) -> MatrixSession:
        """
        Return the live session for a symbol. With refresh, re-read the
        snapshot file and rebuild the matrix when its contents changed,
        which discards any user arrangement.
        """
        with state_lock:
            existing = sessions.get(symbol)
            if existing is not None and not refresh:
                return existing

            snapshots = read_snapshots(symbol, data_dir)
            fingerprint = snapshot_fingerprint(snapshots)
            if existing is not None and existing.fingerprint == fingerprint:
                return existing

            matrix = build_matrix(snapshots)
            session = MatrixSession(
                symbol=symbol,
                fingerprint=fingerprint,
                matrix=matrix,
                controller=DragController(matrix),
                patterns=pattern_cards(snapshots),
            )
            sessions[symbol] = session
            if existing is not None:
                logger.info("Snapshots changed for %s; matrix order reset", symbol)
            return session

    def _with_session(symbol: str, refresh: bool, handler: Callable[[MatrixSession], Any]):
        normalized = normalize_symbol(symbol)
        if normalized is None:
            return _error(f"Invalid symbol: {symbol}", 404)
        try:
            session = _load_session(normalized, refresh=refresh)
        except FileNotFoundError:
            logger.warning("Matrix requested for unknown symbol %s", normalized)
            return _error(f"No snapshots for {normalized}", 404)
        except ValueError as exc:
            logger.warning("Unreadable snapshots for %s: %s", normalized, exc)
            return _error(str(exc), 422)

        try:
            with state_lock:
                return handler(session)
        except RequestError as exc:
            return _error(str(exc), 400)

    def _json_body() -> dict[str, Any]:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise RequestError("Request body must be a JSON object")
        return body

    def _layout_response(session: MatrixSession, applied: bool):
        return jsonify({"applied": applied, "layout": session.matrix.layout_state()})

    @app.route("/api/symbols")
    def symbols_api():
        symbols = available_symbols(data_dir)
        return jsonify({"symbols": symbols, "count": len(symbols)})

    @app.route("/api/matrix/<symbol>")
    def matrix_api(symbol: str):
        """Render payload: order, flags and colored cells for every visible row."""

        def _render(session: MatrixSession):
            view = build_matrix_view(session.symbol, session.matrix, session.patterns)
            return jsonify(serialize_matrix(view))

        return _with_session(symbol, True, _render)

    @app.route("/api/matrix/<symbol>/patterns")
    def patterns_api(symbol: str):
        return _with_session(
            symbol,
            True,
            lambda session: jsonify({"symbol": session.symbol, "patterns": serialize_patterns(session.patterns)}),
        )

    @app.route("/api/matrix/<symbol>/rows/<row_id>/chart")
    def row_chart_api(symbol: str, row_id: str):
        limit = parse_int(request.args.get("points"), CHART_DEFAULT_POINTS, 2, CHART_MAX_POINTS)

        def _chart(session: MatrixSession):
            row = session.matrix.row(row_id)
            if row is None:
                return _error(f"Unknown row: {row_id}", 404)
            return jsonify({"row_id": row_id, "chart_html": build_row_chart(session.symbol, row, limit=limit)})

        return _with_session(symbol, False, _chart)

    @app.route("/api/matrix/<symbol>/rows/move", methods=["POST"])
    def move_row_api(symbol: str):
        def _move(session: MatrixSession):
            body = _json_body()
            section_id = body.get("section_id")
            if not isinstance(section_id, str):
                raise RequestError("'section_id' must be a string")
            applied = session.matrix.move_row(
                section_id,
                require_index(body, "from_index"),
                require_index(body, "to_index"),
            )
            return _layout_response(session, applied)

        return _with_session(symbol, False, _move)

    @app.route("/api/matrix/<symbol>/sections/move", methods=["POST"])
    def move_section_api(symbol: str):
        def _move(session: MatrixSession):
            body = _json_body()
            applied = session.matrix.move_section(require_index(body, "from_index"), require_index(body, "to_index"))
            return _layout_response(session, applied)

        return _with_session(symbol, False, _move)

    @app.route("/api/matrix/<symbol>/sections/<section_id>/toggle", methods=["POST"])
    def toggle_section_api(symbol: str, section_id: str):
        return _with_session(
            symbol,
            False,
            lambda session: _layout_response(session, session.matrix.toggle_collapse(section_id)),
        )

    @app.route("/api/matrix/<symbol>/rows/<row_id>/toggle", methods=["POST"])
    def toggle_row_api(symbol: str, row_id: str):
        return _with_session(
            symbol,
            False,
            lambda session: _layout_response(session, session.matrix.toggle_row_expanded(row_id)),
        )

    @app.route("/api/matrix/<symbol>/collapse-all", methods=["POST"])
    def collapse_all_api(symbol: str):
        def _collapse(session: MatrixSession):
            session.matrix.collapse_all()
            return _layout_response(session, True)

        return _with_session(symbol, False, _collapse)

    @app.route("/api/matrix/<symbol>/expand-all", methods=["POST"])
    def expand_all_api(symbol: str):
        def _expand(session: MatrixSession):
            session.matrix.expand_all()
            return _layout_response(session, True)

        return _with_session(symbol, False, _expand)

    @app.route("/api/matrix/<symbol>/drag/start", methods=["POST"])
    def drag_start_api(symbol: str):
        def _start(session: MatrixSession):
            body = _json_body()
            kind = body.get("kind")
            section_id = body.get("section_id")
            drag = session.controller.pick_up(
                kind if isinstance(kind, str) else "",
                require_index(body, "index"),
                section_id if isinstance(section_id, str) else None,
            )
            return jsonify(
                {
                    "armed": drag is not None,
                    "state": session.controller.state,
                    "payload": drag.payload() if drag is not None else None,
                }
            )

        return _with_session(symbol, False, _start)

    @app.route("/api/matrix/<symbol>/drag/hover", methods=["POST"])
    def drag_hover_api(symbol: str):
        def _hover(session: MatrixSession):
            body = _json_body()
            accepted = session.controller.hover(require_index(body, "index"))
            current = session.controller.session
            return jsonify(
                {
                    "accepted": accepted,
                    "state": session.controller.state,
                    "hover_index": current.hover_index if current is not None else None,
                }
            )

        return _with_session(symbol, False, _hover)

    @app.route("/api/matrix/<symbol>/drag/drop", methods=["POST"])
    def drag_drop_api(symbol: str):
        def _drop(session: MatrixSession):
            body = _json_body()
            target = parse_drop_target(body)
            if session.controller.session is None and body.get("payload") is not None:
                session.controller.resume(body.get("payload"))
            applied = session.controller.drop(target)
            return _layout_response(session, applied)

        return _with_session(symbol, False, _drop)

    @app.route("/api/matrix/<symbol>/drag/end", methods=["POST"])
    def drag_end_api(symbol: str):
        def _end(session: MatrixSession):
            session.controller.end()
            return _layout_response(session, False)

        return _with_session(symbol, False, _end)

    def _log_unhandled_exception(sender: Flask, exception: Exception, **_: Any) -> None:
        logger.exception("Unhandled UI exception: %s", exception)

    got_request_exception.connect(_log_unhandled_exception, app)

    return app


if __name__ == "__main__":
    create_app().run(host=UI_HOST, port=UI_PORT, debug=False)
