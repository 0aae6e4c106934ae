"""
Rendering decisions for calendar dates.

Turns a DayAvailability (or its absence while data is loading) into the
decision the UI needs: whether the date can be picked, what to tell the
user, and which styling category applies.

Per-date lifecycle:
    unknown -> available | partially_booked | fully_booked | off_day
with "past" overlaid on any of them. A date only changes state through a
new aggregation pass.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from vendor_calendar.calendar.grid import generate_grid, month_range
from vendor_calendar.schemas.availability_schema import (
    AvailabilityResult,
    DayAvailability,
    DayStatus,
    pending_note,
)
from vendor_calendar.utils import daterange, today_in_zone

logger = logging.getLogger(__name__)


class DateCategory(str, Enum):
    PAST = "past"
    OFF = "off"
    FULLY_BOOKED = "fully_booked"
    PARTIAL = "partial"
    AVAILABLE = "available"
    LOADING = "loading"


BLOCKING_CATEGORIES = frozenset(
    {DateCategory.PAST, DateCategory.OFF, DateCategory.FULLY_BOOKED}
)


@dataclass(frozen=True)
class DateDecision:
    """What the UI should do with one date."""
    date: date
    selectable: bool
    label: str
    category: DateCategory
    loading: bool = False


@dataclass(frozen=True)
class CalendarDay:
    """A rendered grid cell."""
    date: date
    day: int
    is_current_month: bool
    is_today: bool
    is_past: bool
    is_selected: bool
    availability: Optional[DayAvailability]
    decision: DateDecision


@dataclass
class MonthSummary:
    """Counts over the days of one month."""
    year: int
    month: int
    available_days: int = 0
    partially_booked_days: int = 0
    fully_booked_days: int = 0
    off_days: int = 0
    unknown_days: int = 0
    total_bookings: int = 0


def _category(availability: DayAvailability) -> DateCategory:
    return {
        DayStatus.OFF_DAY: DateCategory.OFF,
        DayStatus.FULLY_BOOKED: DateCategory.FULLY_BOOKED,
        DayStatus.PARTIALLY_BOOKED: DateCategory.PARTIAL,
        DayStatus.AVAILABLE: DateCategory.AVAILABLE,
    }[availability.status]


def _label(availability: DayAvailability, category: DateCategory) -> str:
    count = f"{availability.current_bookings}/{availability.max_bookings_per_day} booked"
    if category == DateCategory.OFF:
        return f"Off day: {availability.reason}" if availability.reason else "Off day"
    if category == DateCategory.FULLY_BOOKED:
        return f"Fully booked ({count})"
    pending = availability.pending_bookings
    if category == DateCategory.PARTIAL:
        return f"{count}, {pending_note(pending)}" if pending else count
    return f"Available with {pending_note(pending)}" if pending else "Available"


def _past_label(availability: Optional[DayAvailability]) -> str:
    if availability is None:
        return "Past date"
    count = f"{availability.current_bookings}/{availability.max_bookings_per_day}"
    status = {
        DayStatus.OFF_DAY: "off day",
        DayStatus.FULLY_BOOKED: f"fully booked {count}",
        DayStatus.PARTIALLY_BOOKED: f"{count} booked",
        DayStatus.AVAILABLE: "available",
    }[availability.status]
    return f"Past date ({status})"


def decide(
    day: date,
    availability: Optional[DayAvailability],
    *,
    is_past: bool,
    is_selected: bool = False,
) -> DateDecision:
    """Decide how a date is presented and whether it can be selected.

    A date with no availability entry yet is treated as selectable and
    marked as loading. Selection state never changes selectability.
    """
    if is_past:
        return DateDecision(
            day, selectable=False, label=_past_label(availability), category=DateCategory.PAST
        )

    if availability is None:
        return DateDecision(
            day, selectable=True, label="Loading...", category=DateCategory.LOADING, loading=True
        )

    category = _category(availability)
    return DateDecision(
        day,
        selectable=category not in BLOCKING_CATEGORIES,
        label=_label(availability, category),
        category=category,
    )


def is_date_pickable(
    day: date,
    availability: Optional[DayAvailability],
    *,
    today: Optional[date] = None,
) -> bool:
    """The predicate booking forms use to accept or reject a date."""
    today = today or today_in_zone()
    return decide(day, availability, is_past=day < today).selectable


def build_calendar(
    anchor: date,
    result: Optional[AvailabilityResult],
    *,
    today: Optional[date] = None,
    selected: Optional[date] = None,
) -> list[CalendarDay]:
    """Combine the month grid with aggregated availability."""
    today = today or today_in_zone()
    days: list[CalendarDay] = []
    for cell in generate_grid(anchor, today=today, selected=selected):
        availability = result.get(cell.date) if result is not None else None
        is_past = cell.date < today
        days.append(CalendarDay(
            date=cell.date,
            day=cell.date.day,
            is_current_month=cell.is_current_month,
            is_today=cell.is_today,
            is_past=is_past,
            is_selected=cell.is_selected,
            availability=availability,
            decision=decide(
                cell.date, availability, is_past=is_past, is_selected=cell.is_selected
            ),
        ))
    return days


def summarize_month(anchor: date, result: AvailabilityResult) -> MonthSummary:
    """Count statuses across the days of the anchor's month."""
    first, last = month_range(anchor)
    summary = MonthSummary(year=anchor.year, month=anchor.month)
    for day in daterange(first, last):
        availability = result.get(day)
        if availability is None:
            summary.unknown_days += 1
            continue
        summary.total_bookings += availability.current_bookings
        if availability.status == DayStatus.OFF_DAY:
            summary.off_days += 1
        elif availability.status == DayStatus.FULLY_BOOKED:
            summary.fully_booked_days += 1
        elif availability.status == DayStatus.PARTIALLY_BOOKED:
            summary.partially_booked_days += 1
        else:
            summary.available_days += 1
    return summary


def next_available_dates(
    result: AvailabilityResult,
    *,
    after: date,
    today: Optional[date] = None,
    limit: int = 3,
) -> list[date]:
    """Pickable dates after ``after`` within the result's range, earliest first."""
    today = today or today_in_zone()
    found: list[date] = []
    for day in sorted(result.days):
        if len(found) >= limit:
            break
        if day <= after:
            continue
        if is_date_pickable(day, result.days[day], today=today):
            found.append(day)
    return found
