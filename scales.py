"""
Scales mapping record fields onto the drawable area.

- LinearScale: continuous domain -> continuous range (years -> x px)
- BandScale: categories -> equal contiguous bands (month names -> y px)
- QuantizeScale: continuous domain -> one of a fixed list of colours

Tick generation and quantize thresholds follow d3-scale.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Hashable, Optional, Sequence

import pandas as pd

from constants import PALETTE

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _js_round(x: float) -> int:
    # half-up, unlike Python's round()
    return math.floor(x + 0.5)


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10**power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1

    if power < 0:
        inc = 10 ** (-power) / factor
        i1, i2 = _js_round(start * inc), _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10**power * factor
        i1, i2 = _js_round(start / inc), _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1

    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def nice_ticks(start: float, stop: float, count: int = 10) -> list[float]:
    """Round-numbered ticks (1, 2 or 5 x 10^k apart) inside [start, stop]."""
    if count <= 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    i1, i2, inc = _tick_spec(start, stop, count)
    if i2 < i1:
        return []
    if inc < 0:
        ticks = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        ticks = [(i1 + i) * inc for i in range(i2 - i1 + 1)]
    return ticks[::-1] if reverse else ticks


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return r0
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = 10) -> list[float]:
        return nice_ticks(self.domain[0], self.domain[1], count)


@dataclass(frozen=True)
class BandScale:
    domain: tuple[Hashable, ...]
    range: tuple[float, float]

    @classmethod
    def from_values(cls, values: Sequence[Hashable], range: tuple[float, float]) -> "BandScale":
        # dict keeps first-occurrence order
        return cls(tuple(dict.fromkeys(values)), range)

    @property
    def bandwidth(self) -> float:
        if not self.domain:
            return 0.0
        return (self.range[1] - self.range[0]) / len(self.domain)

    def __call__(self, value: Hashable) -> Optional[float]:
        try:
            i = self.domain.index(value)
        except ValueError:
            return None
        return self.range[0] + i * self.bandwidth


@dataclass(frozen=True)
class QuantizeScale:
    domain: tuple[float, float]
    colors: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("QuantizeScale needs at least one colour.")

    @property
    def thresholds(self) -> list[float]:
        x0, x1 = self.domain
        n = len(self.colors) - 1
        return [((i + 1) * x1 - (i - n) * x0) / (n + 1) for i in range(n)]

    def index(self, value: float) -> int:
        # bisect_right puts a value sitting on a threshold in the upper bucket
        return bisect_right(self.thresholds, value)

    def __call__(self, value: float) -> str:
        return self.colors[self.index(value)]

    def invert_extent(self, color: str) -> tuple[float, float]:
        i = self.colors.index(color)
        t = self.thresholds
        lo = self.domain[0] if i == 0 else t[i - 1]
        hi = self.domain[1] if i == len(t) else t[i]
        return lo, hi


@dataclass(frozen=True)
class Scales:
    x: LinearScale
    y: BandScale
    color: QuantizeScale


def build_scales(records: pd.DataFrame, inner_width: float, inner_height: float) -> Scales:
    """Build the year, month and temperature scales from derived records."""
    if records.empty:
        raise ValueError("Cannot build scales from an empty record set.")
    x = LinearScale(
        (int(records["year"].min()), int(records["year"].max())),
        (0, inner_width),
    )
    y = BandScale.from_values(records["month_name"].tolist(), (0, inner_height))
    color = QuantizeScale(
        (float(records["temp"].min()), float(records["temp"].max())),
        PALETTE,
    )
    return Scales(x=x, y=y, color=color)
