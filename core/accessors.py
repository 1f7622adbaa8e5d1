"""Named accessors that pull indicator values out of nested snapshot records."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from config.settings import MOVING_AVERAGE_PERIODS

Snapshot = Mapping[str, Any]
Accessor = Callable[[Snapshot], Any]

SNAPSHOT_KEY = "technical_indicators_snapshot"

_ACCESSORS: dict[str, Accessor] = {}


def snapshot_path(*keys: str) -> Accessor:
    """
    Build an accessor reading `technical_indicators_snapshot[k1][k2]...`.
    Any missing or non-mapping intermediate level yields None.
    """
    path = (SNAPSHOT_KEY, *keys)

    def _read(snapshot: Snapshot) -> Any:
        node: Any = snapshot
        for key in path:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
            if node is None:
                return None
        return node

    return _read


def register_accessor(indicator_id: str, accessor: Accessor) -> Accessor:
    """Register one accessor under a unique indicator id."""
    if indicator_id in _ACCESSORS:
        raise ValueError(f"Accessor already registered: {indicator_id}")
    _ACCESSORS[indicator_id] = accessor
    return accessor


def get_accessor(indicator_id: str) -> Accessor:
    return _ACCESSORS[indicator_id]


def list_accessors() -> list[str]:
    return list(_ACCESSORS.keys())


register_accessor("price", snapshot_path("price"))
register_accessor("volume", snapshot_path("volume"))

for _period in MOVING_AVERAGE_PERIODS:
    register_accessor(f"ema-{_period}", snapshot_path("exponential_moving_average", f"EMA_{_period}_DAYS"))
    register_accessor(f"sma-{_period}", snapshot_path("simple_moving_average", f"SMA_{_period}_DAYS"))

register_accessor("rsi", snapshot_path("relative_strength_index"))

register_accessor("macd-line", snapshot_path("moving_average_convergence_divergence", "MACD_LINE"))
register_accessor("signal-line", snapshot_path("moving_average_convergence_divergence", "MACD_SIGNAL_LINE"))
register_accessor("histogram", snapshot_path("moving_average_convergence_divergence", "MACD_HISTOGRAM_LINE"))

register_accessor("k-line", snapshot_path("stochastic_oscillator", "STOCHASTIC_K_LINE"))
register_accessor("d-line", snapshot_path("stochastic_oscillator", "STOCHASTIC_D_LINE"))

register_accessor("positive-di", snapshot_path("directional_indicator", "POSITIVE_DIRECTIONAL_INDICATOR"))
register_accessor("average-di", snapshot_path("directional_indicator", "AVERAGE_DIRECTIONAL_INDICATOR"))
register_accessor("negative-di", snapshot_path("directional_indicator", "NEGATIVE_DIRECTIONAL_INDICATOR"))

register_accessor("upper-band", snapshot_path("bollinger_bands", "BOLLINGER_BAND_UPPER"))
register_accessor("middle-band", snapshot_path("bollinger_bands", "BOLLINGER_BAND_MIDDLE"))
register_accessor("lower-band", snapshot_path("bollinger_bands", "BOLLINGER_BAND_LOWER"))
register_accessor("band-width", snapshot_path("bollinger_bands", "BOLLINGER_BAND_WIDTH"))

register_accessor("upper-line", snapshot_path("keltner_channel", "KELTNER_CHANNEL_UPPER_LINE"))
register_accessor("middle-line", snapshot_path("keltner_channel", "KELTNER_CHANNEL_MIDDLE_LINE"))
register_accessor("lower-line", snapshot_path("keltner_channel", "KELTNER_CHANNEL_LOWER_LINE"))

register_accessor("on-balance-volume", snapshot_path("volume_indicators", "ON_BALANCE_VOLUME"))
register_accessor("adl", snapshot_path("volume_indicators", "ACCUMULATION_DISTRIBUTION_LINE"))
register_accessor("cmf", snapshot_path("volume_indicators", "CHAIKIN_MONEY_FLOW"))
register_accessor("volume-sma-20", snapshot_path("volume_indicators", "VOLUME_SMA_20"))
register_accessor("volume-ratio", snapshot_path("volume_indicators", "VOLUME_RATIO"))

register_accessor("2-days-trend", snapshot_path("price_indicators", "PRICE_TREND_LAST_2_DAYS"))
register_accessor("3-days-trend", snapshot_path("price_indicators", "PRICE_TREND_LAST_3_DAYS"))
register_accessor("5-days-trend", snapshot_path("price_indicators", "PRICE_TREND_LAST_5_DAYS"))

register_accessor("trade-patterns", snapshot_path("last_3_trade_patterns"))
