import argparse
import logging
import os
import sys

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config.settings import SNAPSHOT_DATA_DIR, UI_HOST, UI_PORT
from core.data_reader import available_symbols
from ui.app import create_app


def _check_data_dir(data_dir: str | None) -> list[str]:
    """Warn when the snapshot directory holds nothing the API can serve."""
    resolved = data_dir or SNAPSHOT_DATA_DIR
    symbols = available_symbols(resolved)
    if not symbols:
        print(f"WARNING: No <SYMBOL>.json snapshot files found in {resolved}")
        print("Every /api/matrix/<symbol> request will return 404 until snapshots are written there.")
    else:
        print(f"Serving {len(symbols)} symbol(s) from {resolved}")
    return symbols


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Serve the technical indicator matrix API")
    parser.add_argument("--host", default=UI_HOST, help=f"Bind address (default: {UI_HOST})")
    parser.add_argument("--port", type=int, default=UI_PORT, help=f"Port (default: {UI_PORT})")
    parser.add_argument(
        "--data-dir",
        default=None,
        help=f"Directory holding <SYMBOL>.json snapshot files (default: {SNAPSHOT_DATA_DIR})",
    )
    args = parser.parse_args(argv)

    _check_data_dir(args.data_dir)

    app = create_app(data_dir=args.data_dir)
    logger = logging.getLogger("techmatrix.runner")
    logger.info("Serving matrix API on %s:%s", args.host, args.port)

    try:
        # Single process: matrix order and drag sessions live in memory.
        app.run(host=args.host, port=args.port, debug=False, threaded=False)
    except KeyboardInterrupt:
        logger.warning("Server interrupted by user")
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
