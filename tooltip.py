from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from constants import TOOLTIP_OFFSET


class TooltipState(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


def tooltip_lines(record: Mapping[str, Any]) -> list[str]:
    """Year, month name, absolute temperature and variance, one per line."""
    return [
        str(int(record["year"])),
        str(record["month_name"]),
        f"{float(record['temp']):.2f} °C",
        f"{float(record['variance']):.2f}",
    ]


def tooltip_html(record: Mapping[str, Any]) -> str:
    year, month, temp, variance = tooltip_lines(record)
    return f'<span style="font-size:1.3em">{year}</span><br><b>{month}</b><br>{temp}<br>{variance}'


@dataclass
class Tooltip:
    """
    Hover and pointer state for the floating label.

    Hovering a cell makes it VISIBLE with that cell's record; leaving hides it.
    Pointer moves only shift the label, they never change its content.
    """

    hovered: Optional[Mapping[str, Any]] = None
    pointer: tuple[float, float] = (0.0, 0.0)

    @property
    def state(self) -> TooltipState:
        return TooltipState.HIDDEN if self.hovered is None else TooltipState.VISIBLE

    def hover_enter(self, record: Mapping[str, Any]) -> None:
        self.hovered = record

    def hover_leave(self) -> None:
        self.hovered = None

    def pointer_move(self, x: float, y: float) -> None:
        self.pointer = (x, y)

    @property
    def position(self) -> Optional[tuple[float, float]]:
        if self.hovered is None:
            return None
        return self.pointer[0] + TOOLTIP_OFFSET[0], self.pointer[1] + TOOLTIP_OFFSET[1]

    def lines(self) -> list[str]:
        return [] if self.hovered is None else tooltip_lines(self.hovered)
