"""Console view of the technical indicator matrix for locally stored symbols."""

from __future__ import annotations

import argparse
import datetime
import logging
import os
import sys

from config.settings import LOGS_DIR, SNAPSHOT_DATA_DIR, TREND_DECREASE, TREND_INCREASE
from core.data_reader import available_symbols, read_snapshots
from core.matrix import IndicatorMatrix, build_matrix
from core.trend import color_series

_ARROWS = {TREND_INCREASE: "▲", TREND_DECREASE: "▼"}


def _configure_logging() -> None:
    """Configure file logging for local and cron runs."""
    os.makedirs(LOGS_DIR, exist_ok=True)

    log_file = os.path.join(LOGS_DIR, "techmatrix.log")
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.INFO)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(formatter)
    root.addHandler(handler)


def _print_matrix(symbol: str, matrix: IndicatorMatrix, days: int) -> None:
    """Print the latest cells of every row, section by section."""
    print(f"\n=== {symbol} ({matrix.snapshot_count} snapshots) ===")
    if matrix.is_empty():
        print("No indicators available.")
        return

    for section in matrix.sections():
        print(f"\n[{section.title}]")
        for row in matrix.rows(section.id):
            classes = color_series(row.series)
            cells = [
                f"{row.formatter(point.value)}{_ARROWS.get(color_class, '')}"
                for point, color_class in zip(row.series.points[:days], classes[:days])
            ]
            print(f"  {row.label:<20} {' | '.join(cells)}")


def main(argv: list[str] | None = None) -> int:
    _configure_logging()
    logger = logging.getLogger("techmatrix.console")

    parser = argparse.ArgumentParser(description="Print technical indicator matrices")
    parser.add_argument(
        "--symbols",
        help="Comma-separated list of symbols (default: every file in the snapshot directory)",
        default=None,
    )
    parser.add_argument("--days", type=int, default=5, help="Number of most recent dates to show (default: 5)")
    args = parser.parse_args(argv)

    if args.symbols:
        symbols = [item.strip().upper() for item in args.symbols.split(",") if item.strip()]
    else:
        symbols = available_symbols()

    if not symbols:
        print(f"No snapshot files found in {SNAPSHOT_DATA_DIR}")
        return 1

    start = datetime.datetime.now(datetime.timezone.utc)
    logger.info("Matrix report started at %s for %d symbols", start.isoformat(), len(symbols))

    skipped: list[tuple[str, str]] = []
    for symbol in symbols:
        try:
            snapshots = read_snapshots(symbol)
        except (FileNotFoundError, ValueError) as error:
            logger.warning("Skipping %s: %s", symbol, error)
            skipped.append((symbol, str(error)))
            continue
        _print_matrix(symbol, build_matrix(snapshots), max(1, args.days))

    if skipped:
        print("\nSkipped symbols:")
        for symbol, reason in skipped:
            print(f"- {symbol}: {reason}")

    logger.info("Matrix report ended with %d skipped", len(skipped))
    return 0 if len(skipped) < len(symbols) else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        sys.exit(0)
