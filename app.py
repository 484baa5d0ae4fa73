from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pandas as pd
import streamlit as st

from charts import build_heatmap_figure
from constants import HEIGHT, SUBTITLE_LABEL, TITLE_LABEL, WIDTH
from loader import DataLoader, LoadPhase
from tooltip import Tooltip

LOADING_PLACEHOLDER = "Loading..."
CHART_KEY = "heatmap_chart"


def _configure_logging() -> logging.Logger:
    logger = logging.getLogger("heatmap")
    logger.setLevel(logging.INFO)
    # Streamlit re-executes the script on every interaction
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


LOGGER = _configure_logging()


@dataclass
class DisplaySession:
    """Everything one browser session owns: the dataset and the tooltip state."""

    loader: DataLoader = field(default_factory=DataLoader)
    tooltip: Tooltip = field(default_factory=Tooltip)

    @property
    def phase(self) -> LoadPhase:
        return self.loader.phase


def get_session() -> DisplaySession:
    if "display_session" not in st.session_state:
        st.session_state["display_session"] = DisplaySession()
    return st.session_state["display_session"]


def update_tooltip(tooltip: Tooltip, records: pd.DataFrame, points: list) -> None:
    """
    Drive the tooltip from the chart's point selection. A selected cell is
    hovered, with the pointer at the cell centre; no selection hides it.
    """
    if not points:
        tooltip.hover_leave()
        return
    point = points[0]
    index = point.get("point_index", point.get("point_number"))
    if index is None or not 0 <= int(index) < len(records):
        tooltip.hover_leave()
        return
    tooltip.hover_enter(records.iloc[int(index)].to_dict())
    tooltip.pointer_move(float(point["x"]), float(point["y"]))


def _selected_points() -> list:
    state = st.session_state.get(CHART_KEY) or {}
    return list((state.get("selection") or {}).get("points") or [])


def main() -> None:
    st.set_page_config(page_title=TITLE_LABEL, layout="wide")
    st.title(TITLE_LABEL)
    st.caption(SUBTITLE_LABEL)

    session = get_session()
    records = session.loader.load()
    if session.phase is not LoadPhase.READY or records is None:
        st.code(LOADING_PLACEHOLDER, language=None)
        return

    update_tooltip(session.tooltip, records, _selected_points())
    fig = build_heatmap_figure(records, width=WIDTH, height=HEIGHT, tooltip=session.tooltip)
    st.plotly_chart(
        fig,
        use_container_width=False,
        config={"displayModeBar": False},
        key=CHART_KEY,
        on_select="rerun",
        selection_mode="points",
    )


if __name__ == "__main__":
    main()
