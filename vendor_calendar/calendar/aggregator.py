"""
Availability aggregation: bookings + capacity + off-days -> per-date status.

The aggregator is a pure function over records already in memory. Callers
fetch the whole date range in one query and hand the records over; the
aggregator groups them by date and emits exactly one DayAvailability per
date in the range.

Status rules, in precedence order:
    off_day           an off-day (one-off or recurring) covers the date
    fully_booked      occupying bookings >= capacity
    partially_booked  0 < occupying bookings < capacity
    available         no occupying bookings

Pending requests never occupy a slot while they are outside the occupying
set; they are counted separately and mentioned in the reason.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from vendor_calendar.calendar.recurrence import expand_off_days
from vendor_calendar.schemas.availability_schema import (
    AvailabilityResult,
    DayAvailability,
    DayStatus,
    pending_note,
)
from vendor_calendar.schemas.booking_schema import (
    DEFAULT_OCCUPYING_STATUSES,
    BookingRecord,
    BookingStatus,
)
from vendor_calendar.schemas.off_day_schema import OffDayRecord
from vendor_calendar.utils import daterange

logger = logging.getLogger(__name__)


class InvalidDateRangeError(ValueError):
    """Raised when a range ends before it starts."""


def check_range(start: date, end: date) -> None:
    if end < start:
        raise InvalidDateRangeError(
            f"Date range ends before it starts: {start.isoformat()} > {end.isoformat()}"
        )


def _check_capacity(capacity: int) -> None:
    if capacity < 1:
        raise ValueError(f"capacity must be >= 1, got {capacity}")


def _group_bookings(
    bookings: Iterable[BookingRecord],
    vendor_id: str,
    service_id: Optional[str],
    occupying: frozenset[BookingStatus],
    start: date,
    end: date,
) -> tuple[dict[date, list[BookingRecord]], dict[date, int]]:
    """Occupying bookings per date, plus pending requests that do not occupy."""
    grouped: dict[date, list[BookingRecord]] = defaultdict(list)
    pending: dict[date, int] = defaultdict(int)
    for booking in bookings:
        if booking.vendor_id != vendor_id:
            continue
        if service_id is not None and booking.service_id != service_id:
            continue
        if not start <= booking.event_date <= end:
            continue
        if booking.status in occupying:
            grouped[booking.event_date].append(booking)
        elif booking.status == BookingStatus.PENDING:
            pending[booking.event_date] += 1
    return grouped, pending


def build_day(
    day: date,
    occupying: list[BookingRecord],
    capacity: int,
    off_day: Optional[OffDayRecord] = None,
    pending: int = 0,
) -> DayAvailability:
    """Derive the availability of a single date.

    ``pending`` counts requests that do not hold capacity; they are only
    reported alongside the status.
    """
    count = len(occupying)
    booking_ids = tuple(b.id for b in occupying)

    if off_day is not None:
        return DayAvailability(
            date=day,
            is_available=False,
            current_bookings=count,
            pending_bookings=pending,
            max_bookings_per_day=capacity,
            status=DayStatus.OFF_DAY,
            reason=off_day.reason,
            booking_ids=booking_ids,
            off_day_id=off_day.id,
        )
    if count >= capacity:
        return DayAvailability(
            date=day,
            is_available=False,
            current_bookings=count,
            pending_bookings=pending,
            max_bookings_per_day=capacity,
            status=DayStatus.FULLY_BOOKED,
            reason=f"Fully booked ({count}/{capacity})",
            booking_ids=booking_ids,
        )
    if count > 0:
        reason = f"{count}/{capacity} booked"
        if pending:
            reason = f"{reason}, {pending_note(pending)}"
        return DayAvailability(
            date=day,
            is_available=True,
            current_bookings=count,
            pending_bookings=pending,
            max_bookings_per_day=capacity,
            status=DayStatus.PARTIALLY_BOOKED,
            reason=reason,
            booking_ids=booking_ids,
        )
    return DayAvailability(
        date=day,
        is_available=True,
        current_bookings=0,
        pending_bookings=pending,
        max_bookings_per_day=capacity,
        status=DayStatus.AVAILABLE,
        reason=f"Available with {pending_note(pending)}" if pending else None,
    )


def aggregate(
    vendor_id: str,
    start: date,
    end: date,
    bookings: Iterable[BookingRecord],
    off_days: Iterable[OffDayRecord],
    *,
    service_id: Optional[str] = None,
    capacity: int = 1,
    occupying_statuses: Iterable[BookingStatus] = DEFAULT_OCCUPYING_STATUSES,
    skipped_records: int = 0,
) -> AvailabilityResult:
    """Compute availability for every date in [start, end].

    Args:
        vendor_id: Vendor whose calendar is computed; other vendors' records
            are ignored.
        start: First date of the range (inclusive).
        end: Last date of the range (inclusive).
        bookings: Bookings fetched for the whole range in one query.
        off_days: All of the vendor's off-days; recurring ones are expanded
            onto the range here.
        service_id: Restrict counting to one service. When omitted every
            booking of the vendor counts against the daily capacity.
        capacity: Maximum occupying bookings per day.
        occupying_statuses: Booking statuses that consume capacity.
        skipped_records: Number of malformed upstream records dropped before
            aggregation, carried through for reporting.

    Raises:
        InvalidDateRangeError: If ``end`` is before ``start``.
        ValueError: If ``capacity`` is less than 1.
    """
    check_range(start, end)
    _check_capacity(capacity)
    occupying = frozenset(BookingStatus(s) for s in occupying_statuses)

    grouped, pending = _group_bookings(bookings, vendor_id, service_id, occupying, start, end)
    off_day_map = expand_off_days(off_days, start, end, vendor_id=vendor_id)

    days = {
        d: build_day(d, grouped.get(d, []), capacity, off_day_map.get(d), pending.get(d, 0))
        for d in daterange(start, end)
    }

    warnings = []
    if skipped_records:
        warnings.append(f"{skipped_records} malformed record(s) were skipped")

    logger.debug(
        "Aggregated %d day(s) for vendor %s (%d booked day(s), %d off-day(s))",
        len(days), vendor_id, len(grouped), len(off_day_map),
    )
    return AvailabilityResult(
        vendor_id=vendor_id,
        service_id=service_id,
        start=start,
        end=end,
        days=days,
        warnings=warnings,
        skipped_records=skipped_records,
    )


def degraded_result(
    vendor_id: str,
    start: date,
    end: date,
    *,
    service_id: Optional[str] = None,
    capacity: int = 1,
    warning: str = "Availability could not be verified",
) -> AvailabilityResult:
    """Fail-open result: every date available, flagged as degraded."""
    check_range(start, end)
    _check_capacity(capacity)
    days = {d: build_day(d, [], capacity) for d in daterange(start, end)}
    return AvailabilityResult(
        vendor_id=vendor_id,
        service_id=service_id,
        start=start,
        end=end,
        days=days,
        degraded=True,
        warnings=[warning],
    )
