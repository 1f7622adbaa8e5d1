"""Tests for accessors and snapshot-to-series alignment."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from core.accessors import get_accessor, list_accessors, register_accessor, snapshot_path
from core.normalizer import build_series, indicator_present

from conftest import make_snapshot


class TestSnapshotPath:
    def test_reads_nested_value(self):
        snapshot = make_snapshot("2025-01-01", stochastic_oscillator={"STOCHASTIC_K_LINE": 81.5})
        assert snapshot_path("stochastic_oscillator", "STOCHASTIC_K_LINE")(snapshot) == 81.5

    def test_missing_group_yields_none(self):
        snapshot = make_snapshot("2025-01-01", price=10.0)
        assert snapshot_path("bollinger_bands", "BOLLINGER_BAND_UPPER")(snapshot) is None

    def test_non_mapping_intermediate_yields_none(self):
        snapshot = make_snapshot("2025-01-01", bollinger_bands=[1, 2, 3])
        assert snapshot_path("bollinger_bands", "BOLLINGER_BAND_UPPER")(snapshot) is None

    def test_snapshot_without_indicator_bag(self):
        assert get_accessor("price")({"date": "2025-01-01"}) is None

    def test_string_values_pass_through(self):
        snapshot = make_snapshot("2025-01-01", price_indicators={"PRICE_TREND_LAST_2_DAYS": "UP"})
        assert get_accessor("2-days-trend")(snapshot) == "UP"


class TestRegistry:
    def test_moving_average_accessors_registered_per_period(self):
        ids = list_accessors()
        for period in (9, 20, 21, 50, 96, 200):
            assert f"ema-{period}" in ids
            assert f"sma-{period}" in ids

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError):
            register_accessor("price", snapshot_path("price"))

    def test_unknown_accessor_raises_key_error(self):
        with pytest.raises(KeyError):
            get_accessor("no-such-indicator")


class TestBuildSeries:
    def test_length_and_order_match_input(self, infy_snapshots):
        series = build_series("price", infy_snapshots, get_accessor("price"))
        assert len(series) == len(infy_snapshots)
        assert series.dates == [snapshot["date"] for snapshot in infy_snapshots]
        assert series.values == [1534.9, 1520.0, 1510.4]

    def test_unsorted_input_is_not_reordered(self):
        snapshots = [
            make_snapshot("2025-01-01", price=10.0),
            make_snapshot("2025-01-03", price=30.0),
            make_snapshot("2025-01-02"),
        ]
        series = build_series("price", snapshots, get_accessor("price"))
        assert series.dates == ["2025-01-01", "2025-01-03", "2025-01-02"]
        assert series.values == [10.0, 30.0, None]

    def test_missing_values_become_none(self, infy_snapshots):
        series = build_series("sma-50", infy_snapshots, get_accessor("sma-50"))
        assert series.values == [1569.8, None, 1571.3]

    def test_entirely_absent_indicator_is_full_length(self, infy_snapshots):
        series = build_series("k-line", infy_snapshots, get_accessor("k-line"))
        assert len(series) == 3
        assert series.values == [None, None, None]
        assert not series.has_values()

    def test_empty_input(self):
        series = build_series("price", [], get_accessor("price"))
        assert len(series) == 0
        assert series.points == ()

    def test_raising_accessor_degrades_to_none(self):
        def broken(snapshot):
            return snapshot["technical_indicators_snapshot"]["missing"]

        series = build_series("broken", [make_snapshot("2025-01-01")], broken)
        assert series.values == [None]

    def test_indicator_present_is_existence_check(self):
        snapshots = [
            make_snapshot("2025-01-02", relative_strength_index=0.0),
            make_snapshot("2025-01-01"),
        ]
        assert indicator_present(snapshots, get_accessor("rsi"))
        assert not indicator_present(snapshots, get_accessor("cmf"))
