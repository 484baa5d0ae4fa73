from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Optional

import pandas as pd
import plotly.graph_objects as go

from constants import (
    BOTTOM_AXIS_LABEL,
    BOTTOM_TICK_OFFSET,
    GRIDLINE_COLOR,
    HEIGHT,
    LEFT_TICK_OFFSET,
    LEGEND_OFFSET,
    LEGEND_TITLE,
    MARGIN,
    WIDTH,
)
from scales import BandScale, LinearScale, QuantizeScale, Scales, build_scales
from tooltip import Tooltip, TooltipState, tooltip_html

LEGEND_SWATCH = 15
LEGEND_ROW = 17
LABEL_FONT = dict(size=11, color="rgba(0,0,0,0.7)")


@dataclass(frozen=True)
class AxisTick:
    label: str
    # gridline endpoints and label anchor, all in drawable px
    x0: float
    y0: float
    x1: float
    y1: float
    label_x: float
    label_y: float


@dataclass(frozen=True)
class LegendEntry:
    color: str
    lo: float
    hi: float

    @property
    def label(self) -> str:
        return f"{self.lo:.2f} to {self.hi:.2f}"


def build_cells(records: pd.DataFrame, scales: Scales, inner_width: float, inner_height: float) -> pd.DataFrame:
    """
    One rectangle per record: position from the year/month scales, one year
    wide, one twelfth of the drawable height tall, filled by temperature.
    """
    year_min, year_max = scales.x.domain
    span = year_max - year_min
    bar_width = inner_width / span if span else inner_width
    bar_height = inner_height / 12

    cells = records.copy()
    cells["x"] = cells["year"].map(scales.x)
    cells["y"] = cells["month_name"].map(scales.y)
    cells["width"] = bar_width
    cells["height"] = bar_height
    cells["bucket"] = cells["temp"].map(scales.color.index)
    cells["fill"] = cells["temp"].map(scales.color)
    cells["data_month"] = cells["month"] - 1
    cells["tooltip"] = [tooltip_html(r) for r in cells.to_dict("records")]
    return cells


def left_axis_ticks(y_scale: BandScale, inner_width: float, tick_offset: float = LEFT_TICK_OFFSET) -> list[AxisTick]:
    ticks = []
    for name in y_scale.domain:
        center = y_scale(name) + y_scale.bandwidth / 2
        ticks.append(AxisTick(str(name), 0, center, inner_width, center, -tick_offset, center))
    return ticks


def bottom_axis_ticks(
    x_scale: LinearScale, inner_height: float, tick_offset: float = BOTTOM_TICK_OFFSET
) -> list[AxisTick]:
    ticks = []
    for value in x_scale.ticks():
        px = x_scale(value)
        label = str(int(value)) if float(value).is_integer() else f"{value:g}"
        ticks.append(AxisTick(label, px, 0, px, inner_height, px, inner_height + tick_offset))
    return ticks


def legend_entries(color_scale: QuantizeScale) -> list[LegendEntry]:
    """One entry per palette colour with the temperature range it covers."""
    return [LegendEntry(c, *color_scale.invert_extent(c)) for c in color_scale.colors]


def _stepped_colorscale(colors: tuple[str, ...]) -> list[list]:
    n = len(colors)
    scale: list[list] = []
    for i, color in enumerate(colors):
        scale.append([i / n, color])
        scale.append([(i + 1) / n, color])
    return scale


def _heatmap_trace(cells: pd.DataFrame, scales: Scales) -> go.Heatmap:
    x_edges, y_edges = _cell_edges(cells, scales)
    years = list(range(int(scales.x.domain[0]), int(scales.x.domain[1]) + 1))
    months = list(scales.y.domain)

    # later duplicates are drawn over earlier ones
    latest = cells.drop_duplicates(["year", "month_name"], keep="last")
    z = latest.pivot(index="month_name", columns="year", values="bucket").reindex(index=months, columns=years)

    n = len(scales.color.colors)
    return go.Heatmap(
        x=x_edges,
        y=y_edges,
        z=[[None if pd.isna(v) else v for v in row] for row in z.values.tolist()],
        hoverinfo="skip",
        colorscale=_stepped_colorscale(scales.color.colors),
        zmin=-0.5,
        zmax=n - 0.5,
        showscale=False,
        xgap=0,
        ygap=0,
        name="cells",
    )


def _cell_edges(cells: pd.DataFrame, scales: Scales) -> tuple[list[float], list[float]]:
    """Column edges (one column per year in the domain) and row edges (one per band)."""
    year_min, year_max = (int(v) for v in scales.x.domain)
    months = list(scales.y.domain)
    bar_width = float(cells["width"].iloc[0])
    bar_height = float(cells["height"].iloc[0])
    x_edges = [scales.x(y) for y in range(year_min, year_max + 1)] + [scales.x(year_max) + bar_width]
    y_edges = [scales.y(m) for m in months] + [scales.y(months[-1]) + bar_height]
    return x_edges, y_edges


def _hover_trace(cells: pd.DataFrame) -> go.Scatter:
    # Invisible markers at cell centres carry the hover label and the click
    # selection; point i is record i.
    return go.Scatter(
        x=(cells["x"] + cells["width"] / 2).tolist(),
        y=(cells["y"] + cells["height"] / 2).tolist(),
        mode="markers",
        name="records",
        marker=dict(size=8, symbol="square", color="rgba(0,0,0,0)"),
        selected=dict(marker=dict(opacity=0)),
        unselected=dict(marker=dict(opacity=0)),
        text=cells["tooltip"].tolist(),
        hovertemplate="%{text}<extra></extra>",
        showlegend=False,
    )


def build_heatmap_figure(
    records: pd.DataFrame,
    *,
    width: int = WIDTH,
    height: int = HEIGHT,
    margin: Optional[dict] = None,
    tooltip: Optional[Tooltip] = None,
) -> go.Figure:
    margin = margin or MARGIN
    inner_width = width - margin["left"] - margin["right"]
    inner_height = height - margin["top"] - margin["bottom"]

    scales = build_scales(records, inner_width, inner_height)
    cells = build_cells(records, scales, inner_width, inner_height)
    x_edges, _ = _cell_edges(cells, scales)

    # The last year's column starts at inner_width and extends into the right
    # margin. The plot area grows by that much so one drawable px stays one
    # data unit; the canvas only grows when the margin is too narrow.
    plot_width = max(inner_width, x_edges[-1])
    overflow = plot_width - inner_width
    margin_right = max(0, margin["right"] - overflow)
    canvas_width = margin["left"] + plot_width + margin_right

    def paper_x(px: float) -> float:
        return px / plot_width

    def paper_y(py: float) -> float:
        return 1 - py / inner_height

    left_ticks = left_axis_ticks(scales.y, inner_width)
    bottom_ticks = bottom_axis_ticks(scales.x, inner_height)

    fig = go.Figure()

    # Gridlines sit beneath the cells
    for tick in left_ticks + bottom_ticks:
        fig.add_shape(
            type="line",
            x0=tick.x0,
            x1=tick.x1,
            y0=tick.y0,
            y1=tick.y1,
            xref="x",
            yref="y",
            line=dict(color=GRIDLINE_COLOR, width=1),
            layer="below",
        )

    for tick in left_ticks:
        fig.add_annotation(
            xref="paper",
            x=paper_x(tick.label_x),
            yref="paper",
            y=paper_y(tick.label_y),
            text=tick.label,
            showarrow=False,
            xanchor="right",
            yanchor="middle",
            font=LABEL_FONT,
        )
    for tick in bottom_ticks:
        fig.add_annotation(
            xref="paper",
            x=paper_x(tick.label_x),
            yref="paper",
            y=paper_y(tick.label_y),
            text=tick.label,
            showarrow=False,
            xanchor="center",
            yanchor="top",
            font=LABEL_FONT,
        )
    fig.add_annotation(
        xref="paper",
        x=paper_x(plot_width + LEFT_TICK_OFFSET),
        yref="paper",
        y=paper_y(inner_height + BOTTOM_TICK_OFFSET),
        text=BOTTOM_AXIS_LABEL,
        showarrow=False,
        xanchor="left",
        yanchor="top",
        font=dict(size=12),
    )

    fig.add_trace(_heatmap_trace(cells, scales))
    fig.add_trace(_hover_trace(cells))

    # Legend in the right margin; the offset is in canvas px
    legend_left = inner_width + LEGEND_OFFSET[0] - margin["left"]
    legend_top = LEGEND_OFFSET[1] - margin["top"]
    fig.add_annotation(
        xref="paper",
        x=paper_x(legend_left),
        yref="paper",
        y=paper_y(legend_top),
        text="<b>" + "<br>".join(textwrap.wrap(LEGEND_TITLE, 14)) + "</b>",
        showarrow=False,
        xanchor="left",
        yanchor="bottom",
        font=dict(size=11),
    )
    for i, entry in enumerate(legend_entries(scales.color)):
        top = legend_top + 5 + i * LEGEND_ROW
        fig.add_shape(
            type="rect",
            x0=paper_x(legend_left),
            x1=paper_x(legend_left + LEGEND_SWATCH),
            y0=paper_y(top),
            y1=paper_y(top + LEGEND_SWATCH),
            xref="paper",
            yref="paper",
            fillcolor=entry.color,
            line=dict(width=0),
        )
        fig.add_annotation(
            xref="paper",
            x=paper_x(legend_left + LEGEND_SWATCH + 8),
            yref="paper",
            y=paper_y(top + LEGEND_SWATCH / 2),
            text=entry.label,
            showarrow=False,
            xanchor="left",
            yanchor="middle",
            font=LABEL_FONT,
        )

    if tooltip is not None and tooltip.state is TooltipState.VISIBLE:
        tip_x, tip_y = tooltip.position
        fig.add_annotation(
            xref="paper",
            x=paper_x(tip_x),
            yref="paper",
            y=paper_y(tip_y),
            text="<br>".join(tooltip.lines()),
            showarrow=False,
            xanchor="left",
            yanchor="top",
            align="left",
            bgcolor="white",
            bordercolor="rgba(0,0,0,0.25)",
            borderwidth=1,
            font=dict(size=12),
            name="tooltip",
        )

    fig.update_layout(
        template="simple_white",
        width=canvas_width,
        height=height,
        autosize=False,
        margin=dict(l=margin["left"], r=margin_right, t=margin["top"], b=margin["bottom"], pad=0),
        showlegend=False,
        hovermode="closest",
        clickmode="event+select",
        hoverlabel=dict(bgcolor="white", font=dict(color="black")),
    )
    # Drawable px are data units: x grows right, y grows down
    fig.update_xaxes(range=[0, plot_width], visible=False, fixedrange=True)
    fig.update_yaxes(range=[inner_height, 0], visible=False, fixedrange=True)
    return fig
