# tests/test_calendar_grid.py
from datetime import date, timedelta

import pytest

from core.calendar_grid import month_grid, month_title, shift_month


@pytest.mark.parametrize("year,month", [
    (2025, 2),   # starts on a Saturday
    (2026, 2),   # starts on a Sunday, 28 days
    (2024, 2),   # leap year
    (2025, 3),   # 31 days starting Saturday needs six rows
    (2025, 6),
    (2025, 12),
])
def test_grid_has_42_cells_with_consecutive_days(year, month):
    cells = month_grid(year, month)
    assert len(cells) == 42

    days = [c for c in cells if c is not None]
    assert days[0] == date(year, month, 1)
    for a, b in zip(days, days[1:]):
        assert b - a == timedelta(days=1)
    assert all(d.month == month for d in days)

    first = cells.index(days[0])
    last = first + len(days) - 1
    assert all(c is None for c in cells[:first])
    assert all(c is None for c in cells[last + 1:])


def test_leading_padding_matches_weekday():
    # 1 March 2025 is a Saturday
    assert month_grid(2025, 3)[:7] == [None] * 6 + [date(2025, 3, 1)]
    # 1 June 2025 is a Sunday
    assert month_grid(2025, 6)[0] == date(2025, 6, 1)


def test_shift_month_wraps_years():
    assert shift_month(2025, 1, -1) == (2024, 12)
    assert shift_month(2025, 12, 1) == (2026, 1)
    assert shift_month(2025, 6, 0) == (2025, 6)


def test_month_title():
    assert month_title(2025, 3) == "March 2025"
