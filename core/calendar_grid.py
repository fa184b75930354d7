"""
Month grid for the meditation calendar.
Six Sunday-first weeks, padded with None around the month's days.
"""

import calendar
from datetime import date
from typing import List, Optional, Tuple

GRID_CELLS = 42


def month_grid(year: int, month: int) -> List[Optional[date]]:
    """
    Build the 42 calendar cells for a month.

    Leading cells up to the first weekday and trailing cells after the
    last day are None.
    """
    first = date(year, month, 1)
    leading = (first.weekday() + 1) % 7
    days_in_month = calendar.monthrange(year, month)[1]

    cells: List[Optional[date]] = [None] * leading
    cells.extend(date(year, month, day) for day in range(1, days_in_month + 1))
    cells.extend([None] * (GRID_CELLS - len(cells)))
    return cells


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months forward (or back when negative)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_title(year: int, month: int) -> str:
    """Format as e.g. 'March 2025'."""
    return f"{calendar.month_name[month]} {year}"
