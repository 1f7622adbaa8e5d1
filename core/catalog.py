"""Fixed catalog of candidate matrix sections and their indicator rows."""

from __future__ import annotations

from dataclasses import dataclass, field

from config.settings import MOVING_AVERAGE_PERIODS
from core.accessors import Accessor, get_accessor
from core.formatters import Formatter, format_number, format_text, format_volume

ICON_CHART_BAR = "chart-bar"
ICON_ACTIVITY = "activity"
ICON_TRENDING_UP = "trending-up"


@dataclass(frozen=True)
class RowSpec:
    """
    Candidate indicator row.

    Conditional rows are kept only when some snapshot exposes the indicator;
    static rows are always kept once their section is included.
    """

    id: str
    label: str
    color: str
    formatter: Formatter = format_number
    conditional: bool = False
    default_expanded: bool = False

    @property
    def accessor(self) -> Accessor:
        return get_accessor(self.id)


@dataclass(frozen=True)
class SectionSpec:
    id: str
    title: str
    icon: str
    rows: tuple[RowSpec, ...] = field(default_factory=tuple)


def _moving_average_rows() -> tuple[RowSpec, ...]:
    rows: list[RowSpec] = []
    for period in MOVING_AVERAGE_PERIODS:
        rows.append(RowSpec(f"ema-{period}", f"EMA {period}", "#3182CE", conditional=True))
        rows.append(RowSpec(f"sma-{period}", f"SMA {period}", "#805AD5", conditional=True))
    return tuple(rows)


SECTION_CATALOG: tuple[SectionSpec, ...] = (
    SectionSpec(
        "price-volume",
        "Price & Volume",
        ICON_CHART_BAR,
        (
            RowSpec("price", "Price", "#4A5568", default_expanded=True),
            RowSpec("volume", "Volume", "#2B6CB0", formatter=format_volume),
        ),
    ),
    SectionSpec("moving-averages", "Moving Averages", ICON_ACTIVITY, _moving_average_rows()),
    SectionSpec("rsi", "RSI", ICON_ACTIVITY, (RowSpec("rsi", "RSI", "#C53030"),)),
    SectionSpec(
        "macd",
        "MACD",
        ICON_ACTIVITY,
        (
            RowSpec("macd-line", "MACD Line", "#6B46C1"),
            RowSpec("signal-line", "Signal Line", "#6B46C1"),
            RowSpec("histogram", "Histogram", "#6B46C1"),
        ),
    ),
    SectionSpec(
        "stochastic",
        "Stochastic Oscillator",
        ICON_ACTIVITY,
        (
            RowSpec("k-line", "%K Line", "#DD6B20"),
            RowSpec("d-line", "%D Line", "#DD6B20"),
        ),
    ),
    SectionSpec(
        "directional",
        "Directional Indicators",
        ICON_TRENDING_UP,
        (
            RowSpec("positive-di", "Positive DI", "#2C7A7B"),
            RowSpec("average-di", "Average DI", "#2C7A7B"),
            RowSpec("negative-di", "Negative DI", "#2C7A7B"),
        ),
    ),
    SectionSpec(
        "bollinger",
        "Bollinger Bands",
        ICON_ACTIVITY,
        (
            RowSpec("upper-band", "Upper Band", "#5A67D8"),
            RowSpec("middle-band", "Middle Band", "#5A67D8"),
            RowSpec("lower-band", "Lower Band", "#5A67D8"),
            RowSpec("band-width", "Band Width", "#5A67D8"),
        ),
    ),
    SectionSpec(
        "keltner",
        "Keltner Channel",
        ICON_ACTIVITY,
        (
            RowSpec("upper-line", "Upper Line", "#319795"),
            RowSpec("middle-line", "Middle Line", "#319795"),
            RowSpec("lower-line", "Lower Line", "#319795"),
        ),
    ),
    SectionSpec(
        "volume-indicators",
        "Volume Indicators",
        ICON_CHART_BAR,
        (
            RowSpec("on-balance-volume", "On Balance Volume", "#4299E1", formatter=format_volume),
            RowSpec("adl", "ADL", "#4299E1", formatter=format_volume),
            RowSpec("cmf", "CMF", "#4299E1"),
            RowSpec("volume-sma-20", "Volume SMA 20", "#4299E1", formatter=format_volume),
            RowSpec("volume-ratio", "Volume Ratio", "#4299E1"),
        ),
    ),
    SectionSpec(
        "price-trends",
        "Price Trends",
        ICON_TRENDING_UP,
        (
            RowSpec("2-days-trend", "2 Days Trend", "#718096", formatter=format_text),
            RowSpec("3-days-trend", "3 Days Trend", "#718096", formatter=format_text),
            RowSpec("5-days-trend", "5 Days Trend", "#718096", formatter=format_text),
        ),
    ),
)
