"""Expansion of one-off and recurring off-days onto concrete dates."""

import calendar
import logging
from datetime import date, timedelta
from typing import Iterable, Iterator, Optional

from vendor_calendar.schemas.off_day_schema import OffDayRecord, RecurringPattern

logger = logging.getLogger(__name__)


def _weekly(anchor: date, start: date, end: date) -> Iterator[date]:
    offset = (anchor.weekday() - start.weekday()) % 7
    cur = start + timedelta(days=offset)
    while cur <= end:
        yield cur
        cur += timedelta(days=7)


def _monthly(anchor: date, start: date, end: date) -> Iterator[date]:
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        # Months without the anchor's day (e.g. the 31st) are skipped.
        if anchor.day <= calendar.monthrange(year, month)[1]:
            yield date(year, month, anchor.day)
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)


def _yearly(anchor: date, start: date, end: date) -> Iterator[date]:
    for year in range(start.year, end.year + 1):
        if anchor.month == 2 and anchor.day == 29 and not calendar.isleap(year):
            continue
        yield date(year, anchor.month, anchor.day)


_EXPANDERS = {
    RecurringPattern.WEEKLY: _weekly,
    RecurringPattern.MONTHLY: _monthly,
    RecurringPattern.YEARLY: _yearly,
}


def occurrences(off_day: OffDayRecord, start: date, end: date) -> list[date]:
    """Concrete dates in [start, end] on which the off-day applies."""
    pattern = off_day.effective_pattern
    if pattern is None:
        return [off_day.date] if start <= off_day.date <= end else []

    window_start = max(start, off_day.date)
    window_end = end
    if off_day.recurring_end_date is not None:
        window_end = min(window_end, off_day.recurring_end_date)
    if window_start > window_end:
        return []

    return [
        d for d in _EXPANDERS[pattern](off_day.date, window_start, window_end)
        if window_start <= d <= window_end
    ]


def expand_off_days(
    off_days: Iterable[OffDayRecord],
    start: date,
    end: date,
    vendor_id: Optional[str] = None,
) -> dict[date, OffDayRecord]:
    """Map every date in [start, end] covered by an off-day to that off-day.

    When several off-days cover the same date the first one in input order
    is kept. Off-days belonging to other vendors are ignored when
    ``vendor_id`` is given.
    """
    expanded: dict[date, OffDayRecord] = {}
    for off_day in off_days:
        if vendor_id is not None and off_day.vendor_id != vendor_id:
            continue
        for d in occurrences(off_day, start, end):
            expanded.setdefault(d, off_day)
    logger.debug("Expanded off-days onto %d date(s) in %s..%s", len(expanded), start, end)
    return expanded
