from constants import TOOLTIP_OFFSET
from tooltip import Tooltip, TooltipState, tooltip_html, tooltip_lines

RECORD = {"year": 1753, "month": 1, "variance": -1.5, "month_name": "January", "temp": 7.16}


def test_tooltip_lines_format():
    assert tooltip_lines(RECORD) == ["1753", "January", "7.16 °C", "-1.50"]


def test_tooltip_html_contains_fields():
    html = tooltip_html(RECORD)
    assert "1753" in html
    assert "<b>January</b>" in html
    assert "7.16 °C" in html
    assert html.endswith("-1.50")


def test_tooltip_starts_hidden():
    tip = Tooltip()
    assert tip.state is TooltipState.HIDDEN
    assert tip.position is None
    assert tip.lines() == []


def test_tooltip_hover_move_leave():
    tip = Tooltip()
    tip.pointer_move(100, 200)
    tip.hover_enter(RECORD)
    assert tip.state is TooltipState.VISIBLE
    assert tip.lines() == tooltip_lines(RECORD)
    assert tip.position == (100 + TOOLTIP_OFFSET[0], 200 + TOOLTIP_OFFSET[1])

    before = tip.position
    tip.pointer_move(110, 200)
    assert tip.position == (before[0] + 10, before[1])
    assert tip.lines() == tooltip_lines(RECORD)

    tip.hover_leave()
    assert tip.state is TooltipState.HIDDEN
    assert tip.position is None


def test_tooltip_pointer_moves_while_hidden_are_kept():
    tip = Tooltip()
    tip.pointer_move(5, 5)
    assert tip.position is None
    tip.hover_enter(RECORD)
    assert tip.position == (5 + TOOLTIP_OFFSET[0], 5 + TOOLTIP_OFFSET[1])
