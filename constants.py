from __future__ import annotations

DATA_URL: str = (
    "https://raw.githubusercontent.com/freeCodeCamp/ProjectReferenceData/master/global-temperature.json"
)

# Base land-surface temperature (°C) the monthly variances are measured against.
BASE_TEMPERATURE: float = 8.66

TITLE_LABEL = "Monthly Global Land-Surface Temperature"
SUBTITLE_LABEL = "1753 - 2015 | base temperature 8.66 °C"
BOTTOM_AXIS_LABEL = "Year"
LEGEND_TITLE = "Temperature Range in °C"

# Canvas in logical px; the drawable area is what the margins leave over.
WIDTH: int = 1200
HEIGHT: int = 500
MARGIN = {"top": 30, "right": 170, "bottom": 20, "left": 100}
INNER_WIDTH: int = WIDTH - MARGIN["left"] - MARGIN["right"]
INNER_HEIGHT: int = HEIGHT - MARGIN["top"] - MARGIN["bottom"]

# Coldest to hottest.
PALETTE: tuple[str, ...] = (
    "#0000ff",
    "#0022ff",
    "#0064ff",
    "#00a4ff",
    "#00e4ff",
    "#00ff83",
    "#17ff00",
    "#b0ff00",
    "#FFf000",
    "#FFc800",
    "#FFa000",
    "#FF7800",
    "#FF5000",
    "#FF2800",
    "#FF0000",
)

GRIDLINE_COLOR = "#f1f2f3"
LEFT_TICK_OFFSET = 12
BOTTOM_TICK_OFFSET = 8

# Legend origin in canvas px: x is measured from the drawable width, y from the top.
LEGEND_OFFSET = (130, 50)

# Tooltip position relative to the pointer.
TOOLTIP_OFFSET = (15, -25)
