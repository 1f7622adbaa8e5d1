#!/usr/bin/env python3
"""Snapshot freshness and indicator coverage report."""

import os
import sys
import datetime

import pandas as pd

# Add project to path
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config.settings import SNAPSHOT_DATA_DIR, STALE_SNAPSHOT_DAYS
from core.data_reader import available_symbols, read_snapshots
from core.matrix import build_matrix


def check_snapshot_freshness(data_dir=None, today=None):
    """Report on snapshot freshness and which sections each symbol renders."""
    print("\n📊 Indicator Snapshot Freshness Report")
    print("=" * 70)

    today = today or datetime.date.today()
    symbols = available_symbols(data_dir)
    fresh_count = 0
    stale_count = 0
    broken_count = 0

    for symbol in symbols:
        try:
            snapshots = read_snapshots(symbol, data_dir)
        except (FileNotFoundError, ValueError) as e:
            broken_count += 1
            print(f"  ✗ Error          {symbol:20} | {str(e)[:40]}")
            continue

        if not snapshots:
            stale_count += 1
            print(f"  ✗ Empty          {symbol:20} | rows=    0")
            continue

        latest = pd.to_datetime(snapshots[0].get("date"), errors="coerce", format="ISO8601", utc=True)
        days_old = (today - latest.date()).days
        matrix = build_matrix(snapshots)

        if days_old <= STALE_SNAPSHOT_DAYS:
            fresh_count += 1
            status = "✓ Fresh" if days_old == 0 else f"⚠ Current ({days_old}d)"
        else:
            stale_count += 1
            status = f"✗ Stale ({days_old}d)"

        print(
            f"  {status:20} {symbol:20} | rows={len(snapshots):5} | "
            f"sections={len(matrix.section_order):2} | last={latest.date()}"
        )

    print("\n" + "=" * 70)
    print("Summary:")
    print(f"  Fresh/current:        {fresh_count:3} / {len(symbols)}")
    print(f"  Stale or empty:       {stale_count:3} / {len(symbols)}")
    print(f"  Unreadable:           {broken_count:3} / {len(symbols)}")

    return {
        "symbols": len(symbols),
        "fresh": fresh_count,
        "stale": stale_count,
        "broken": broken_count,
        "healthy": bool(symbols) and stale_count + broken_count == 0,
    }


def main():
    print(f"📂 Snapshot Directory: {SNAPSHOT_DATA_DIR}")
    report = check_snapshot_freshness()
    return 0 if report["healthy"] else 1


if __name__ == "__main__":
    sys.exit(main())
