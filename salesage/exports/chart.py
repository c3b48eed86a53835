from __future__ import annotations
from typing import Any, Dict, List

import plotly.graph_objects as go

from salesage.exports.formatting import format_axis_inr, format_inr, short_label
from salesage.forecasting.engine import ForecastResult

CHART_KINDS = ("area", "bar")
BRAND_GREEN = "#245e4f"
AREA_FILL = "rgba(122, 201, 167, 0.4)"  # #7ac9a7
GRID = "#f0f0f0"


def chart_series(result: ForecastResult) -> Dict[str, List[Any]]:
    labels = [p.label for p in result.points]
    return {
        "labels": labels,
        "short_labels": [short_label(label) for label in labels],
        "values": [p.value for p in result.points],
    }


def _axis_ticks(values: List[int], count: int = 5) -> List[float]:
    top = max(values, default=0)
    bottom = min(0, min(values, default=0))
    if top == bottom:
        return [float(bottom)]
    step = (top - bottom) / (count - 1)
    return [bottom + step * i for i in range(count)]


def build_figure(result: ForecastResult, kind: str = "area") -> go.Figure:
    """Plotly figure of the monthly projection as an area or bar chart."""
    if kind not in CHART_KINDS:
        raise ValueError(f"unknown chart kind '{kind}', expected one of {', '.join(CHART_KINDS)}")

    series = chart_series(result)
    hover = [format_inr(v) for v in series["values"]]
    fig = go.Figure()
    if kind == "area":
        fig.add_trace(go.Scatter(
            x=series["short_labels"],
            y=series["values"],
            mode="lines",
            name="Sales",
            fill="tozeroy",
            fillcolor=AREA_FILL,
            line=dict(color=BRAND_GREEN, shape="spline"),
            customdata=hover,
            hovertemplate="%{customdata}<extra>%{x}</extra>",
        ))
    else:
        fig.add_trace(go.Bar(
            x=series["short_labels"],
            y=series["values"],
            name="Sales",
            marker_color=BRAND_GREEN,
            customdata=hover,
            hovertemplate="%{customdata}<extra>%{x}</extra>",
        ))

    ticks = _axis_ticks(series["values"])
    fig.update_layout(
        showlegend=True,
        plot_bgcolor="white",
        margin=dict(t=10, r=30, l=0, b=0),
        xaxis=dict(gridcolor=GRID, tickfont=dict(size=12)),
        yaxis=dict(
            gridcolor=GRID,
            tickfont=dict(size=12),
            tickvals=ticks,
            ticktext=[format_axis_inr(t) for t in ticks],
        ),
    )
    return fig
