"""
Month grid generation for the availability calendar.

Every month is rendered as 6 weeks x 7 days starting on Sunday, so the
grid always holds 42 consecutive dates including the leading and trailing
days of the neighbouring months.

Usage:
    cells = generate_grid(date(2025, 6, 1), today=date(2025, 6, 10))
    assert len(cells) == GRID_DAYS
    start, end = grid_range(date(2025, 6, 1))
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from vendor_calendar.utils import today_in_zone

GRID_WEEKS = 6
DAYS_PER_WEEK = 7
GRID_DAYS = GRID_WEEKS * DAYS_PER_WEEK


@dataclass(frozen=True)
class GridCell:
    """One date slot in the month grid."""
    date: date
    is_current_month: bool
    is_today: bool
    is_selected: bool = False


def first_of_month(anchor: date) -> date:
    return anchor.replace(day=1)


def shift_month(anchor: date, months: int) -> date:
    """Return the first day of the month ``months`` away from anchor."""
    index = anchor.year * 12 + (anchor.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_range(anchor: date) -> tuple[date, date]:
    """First and last day of the anchor's month."""
    last = calendar.monthrange(anchor.year, anchor.month)[1]
    return first_of_month(anchor), anchor.replace(day=last)


def grid_start(anchor: date) -> date:
    """The Sunday on or before the first day of the anchor's month."""
    first = first_of_month(anchor)
    # date.weekday(): Monday == 0 ... Sunday == 6
    days_since_sunday = (first.weekday() + 1) % DAYS_PER_WEEK
    return first - timedelta(days=days_since_sunday)


def grid_range(anchor: date) -> tuple[date, date]:
    """Inclusive bounds of the 42-day grid for the anchor's month."""
    start = grid_start(anchor)
    return start, start + timedelta(days=GRID_DAYS - 1)


def grid_dates(anchor: date) -> list[date]:
    start = grid_start(anchor)
    return [start + timedelta(days=i) for i in range(GRID_DAYS)]


def generate_grid(
    anchor: date,
    *,
    today: Optional[date] = None,
    selected: Optional[date] = None,
) -> list[GridCell]:
    """Build the 42-cell grid for the anchor's month.

    Args:
        anchor: Any date inside the month to display.
        today: Reference "today"; defaults to today in the calendar timezone.
        selected: Currently selected date, if any.
    """
    today = today or today_in_zone()
    return [
        GridCell(
            date=d,
            is_current_month=(d.year, d.month) == (anchor.year, anchor.month),
            is_today=d == today,
            is_selected=selected is not None and d == selected,
        )
        for d in grid_dates(anchor)
    ]
