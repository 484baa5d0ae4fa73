from __future__ import annotations

from datetime import date

# Any date works as long as only the month changes; day 28 exists in every month.
_REFERENCE_YEAR = 1976
_REFERENCE_DAY = 28


def month_name(month: int) -> str:
    """
    Full month name for a 1-based month number, in the process locale,
    e.g. 1 -> 'January'. Raises ValueError outside 1..12.
    """
    return date(_REFERENCE_YEAR, int(month), _REFERENCE_DAY).strftime("%B")
