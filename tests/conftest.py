"""Shared fixtures for indicator matrix tests."""

import json
import shutil
import sys
from pathlib import Path

import pytest

# Ensure project root is importable
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def make_snapshot(date, **groups):
    """Build one snapshot record with the given indicator groups."""
    return {"symbol": "TEST", "date": date, "technical_indicators_snapshot": dict(groups)}


@pytest.fixture
def infy_document():
    """Raw backend envelope with three valid dates (out of order) and one bad date."""
    with open(FIXTURES / "infy_snapshots.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def infy_snapshots(infy_document):
    from core.data_reader import sort_snapshots

    return sort_snapshots(infy_document["data"])


@pytest.fixture
def snapshot_dir(tmp_path):
    """Temporary snapshot directory holding INFY.json."""
    data_dir = tmp_path / "snapshots"
    data_dir.mkdir()
    shutil.copy(FIXTURES / "infy_snapshots.json", data_dir / "INFY.json")
    return data_dir


@pytest.fixture
def three_section_snapshots():
    """Snapshots exposing exactly the Price & Volume, Moving Averages and RSI sections."""
    return [
        make_snapshot(
            "2025-01-03",
            price=101.0,
            volume=1000,
            exponential_moving_average={"EMA_20_DAYS": 100.5},
            relative_strength_index=55.0,
        ),
        make_snapshot("2025-01-02", price=100.0, volume=900, relative_strength_index=52.0),
    ]
