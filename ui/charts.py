"""Chart helpers for indicator matrix rows."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
from plotly.offline import plot

from config.settings import TREND_DECREASE, TREND_INCREASE
from core.matrix import Row
from core.trend import color_series

_MARKER_COLORS = {
    TREND_INCREASE: "green",
    TREND_DECREASE: "red",
}


def row_chart_frame(row: Row, limit: int | None = None) -> pd.DataFrame:
    """Chronological frame of one row's numeric values with their trend classes."""
    frame = pd.DataFrame(
        {
            "Date": pd.to_datetime(pd.Series(row.series.dates, dtype="object"), errors="coerce", format="ISO8601", utc=True),
            "Value": pd.to_numeric(pd.Series(row.series.values, dtype="object"), errors="coerce"),
            "Trend": color_series(row.series),
        }
    )
    if limit is not None:
        frame = frame.head(limit)
    frame = frame.dropna(subset=["Date", "Value"])
    return frame.iloc[::-1].reset_index(drop=True)


def build_row_chart(symbol: str, row: Row, limit: int | None = None) -> str:
    """Build a local interactive Plotly chart for one indicator row."""
    data = row_chart_frame(row, limit=limit)

    figure = go.Figure()
    figure.add_trace(
        go.Scatter(
            x=data["Date"],
            y=data["Value"],
            mode="lines+markers",
            name=row.label,
            line={"color": row.color},
            marker={
                "size": 8,
                "color": [_MARKER_COLORS.get(trend, "gray") for trend in data["Trend"]],
            },
            hovertemplate="Date: %{x|%Y-%m-%d}<br>Value: %{y:.2f}<extra></extra>",
        )
    )

    figure.update_layout(
        title=f"{symbol} {row.label}",
        template="plotly_white",
        hovermode="x unified",
        showlegend=False,
        margin={"l": 30, "r": 20, "t": 50, "b": 30},
        xaxis={"title": "Date", "type": "date"},
        yaxis={"title": row.label},
    )

    return plot(
        figure,
        output_type="div",
        include_plotlyjs=False,
        config={"displaylogo": False, "responsive": True},
    )
