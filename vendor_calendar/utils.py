"""Shared date helpers used across the calendar package."""

from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo

from vendor_calendar.config import settings

DateLike = Union[date, datetime, str]


def _local_date(moment: datetime, tz_name: Optional[str]) -> date:
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(ZoneInfo(tz_name or settings.calendar.timezone)).date()


def parse_date_key(value: DateLike, tz_name: Optional[str] = None) -> date:
    """Normalize a date, datetime or ISO string to a calendar date.

    Timestamps carrying an offset (or ``Z``) are converted to the reference
    timezone before taking the date. Plain dates and naive timestamps keep
    the date as written.

    Examples:
        >>> parse_date_key("2025-06-15")
        datetime.date(2025, 6, 15)
        >>> parse_date_key("2025-06-14T16:00:00.000Z", "Asia/Manila")
        datetime.date(2025, 6, 15)
        >>> parse_date_key("2025-06-15 08:00:00")
        datetime.date(2025, 6, 15)
    """
    if isinstance(value, datetime):
        return _local_date(value, tz_name)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Expected a date or ISO string, got {type(value).__name__}")
    text = value.strip()
    if "T" not in text and " " not in text:
        return date.fromisoformat(text)

    stamp = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _local_date(datetime.fromisoformat(stamp), tz_name)
    except ValueError:
        # Unusual time parts: keep the written date.
        return date.fromisoformat(text.replace("T", " ").split(" ", 1)[0])


def to_date_key(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.isoformat()


def today_in_zone(tz_name: Optional[str] = None) -> date:
    """Return today's date in the reference timezone."""
    return datetime.now(ZoneInfo(tz_name or settings.calendar.timezone)).date()


def daterange(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, inclusive."""
    cur = start
    while cur <= end:
        yield cur
        cur = cur + timedelta(days=1)
