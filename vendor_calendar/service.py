"""
Availability service: the single entry point frontends call.

Wraps a DataAccess implementation and the pure aggregation functions.
``aggregate`` is pure; ``load``/``load_month``/``check_date`` fetch the
whole range at once and fail open when the backend is unreachable;
off-day mutations raise MutationFailure and never change anything
locally until the backend confirms.

Usage:
    service = AvailabilityService(HttpDataAccess())
    result = await service.load_month("V1", date(2025, 6, 1))
    if result.degraded:
        warn_user(result.warnings[0])
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from vendor_calendar.calendar.aggregator import aggregate, check_range, degraded_result
from vendor_calendar.calendar.grid import grid_range
from vendor_calendar.calendar.view import DateDecision, decide, next_available_dates
from vendor_calendar.config import AppConfig, settings
from vendor_calendar.data_access.base import DataAccess, DataUnavailableError
from vendor_calendar.data_access.parsing import parse_bookings, parse_off_days
from vendor_calendar.logging_context import get_vendor_logger, set_vendor_id
from vendor_calendar.schemas.availability_schema import AvailabilityResult, DayAvailability
from vendor_calendar.schemas.booking_schema import BookingRecord, BookingStatus
from vendor_calendar.schemas.off_day_schema import OffDayRecord, OffDayRequest, RecurringPattern
from vendor_calendar.utils import today_in_zone

logger = get_vendor_logger(__name__)

# How far ahead check_date looks for alternative dates.
ALTERNATIVE_LOOKAHEAD_DAYS = 60


class MutationFailure(Exception):
    """Raised when the backend did not confirm an off-day change."""


@dataclass
class DateCheck:
    """Answer to "can this vendor be booked on this date?"."""
    date: date
    vendor_id: str
    pickable: bool
    decision: DateDecision
    availability: Optional[DayAvailability] = None
    alternatives: list[date] = field(default_factory=list)
    degraded: bool = False


class AvailabilityService:
    """Computes vendor availability on top of a DataAccess backend."""

    def __init__(self, data_access: DataAccess, config: Optional[AppConfig] = None) -> None:
        self.data_access = data_access
        self.config = config or settings

    @property
    def occupying_statuses(self) -> frozenset[BookingStatus]:
        return frozenset(BookingStatus(s) for s in self.config.calendar.occupying_statuses)

    def aggregate(
        self,
        vendor_id: str,
        start: date,
        end: date,
        bookings: Iterable[BookingRecord],
        off_days: Iterable[OffDayRecord],
        *,
        service_id: Optional[str] = None,
        capacity: Optional[int] = None,
        skipped_records: int = 0,
    ) -> AvailabilityResult:
        """Pure aggregation using the configured capacity and occupying set."""
        return aggregate(
            vendor_id,
            start,
            end,
            bookings,
            off_days,
            service_id=service_id,
            capacity=capacity if capacity is not None else self.config.calendar.default_capacity,
            occupying_statuses=self.occupying_statuses,
            skipped_records=skipped_records,
        )

    async def load(
        self,
        vendor_id: str,
        start: date,
        end: date,
        *,
        service_id: Optional[str] = None,
        capacity: Optional[int] = None,
    ) -> AvailabilityResult:
        """Fetch records for the whole range in one go and aggregate them.

        Raises:
            InvalidDateRangeError: If ``end`` is before ``start``.
        """
        check_range(start, end)
        if capacity is None:
            capacity = self.config.calendar.default_capacity
        set_vendor_id(vendor_id)
        logger.debug("Loading availability %s..%s (service=%s)", start, end, service_id)

        try:
            raw_bookings, raw_off_days = await asyncio.gather(
                self.data_access.fetch_bookings(vendor_id, start, end, service_id),
                self.data_access.fetch_off_days(vendor_id),
            )
        except DataUnavailableError as e:
            logger.warning("Availability unavailable for vendor %s, failing open: %s", vendor_id, e)
            return degraded_result(
                vendor_id,
                start,
                end,
                service_id=service_id,
                capacity=capacity,
                warning=f"Availability could not be verified: {e}",
            )

        bookings = parse_bookings(raw_bookings)
        off_days = parse_off_days(raw_off_days)
        result = self.aggregate(
            vendor_id,
            start,
            end,
            bookings.records,
            off_days.records,
            service_id=service_id,
            capacity=capacity,
            skipped_records=bookings.skipped + off_days.skipped,
        )
        logger.info(
            "Loaded %d day(s) for vendor %s: %d unavailable",
            len(result.days), vendor_id, len(result.unavailable_dates()),
        )
        return result

    async def load_month(
        self,
        vendor_id: str,
        anchor: date,
        *,
        service_id: Optional[str] = None,
        capacity: Optional[int] = None,
    ) -> AvailabilityResult:
        """Load the full 42-day grid around the anchor's month."""
        start, end = grid_range(anchor)
        return await self.load(vendor_id, start, end, service_id=service_id, capacity=capacity)

    async def check_date(
        self,
        vendor_id: str,
        day: date,
        *,
        service_id: Optional[str] = None,
        capacity: Optional[int] = None,
        today: Optional[date] = None,
    ) -> DateCheck:
        """Check one date and suggest alternatives when it cannot be picked."""
        today = today or today_in_zone(self.config.calendar.timezone)
        end = day + timedelta(days=ALTERNATIVE_LOOKAHEAD_DAYS)
        result = await self.load(
            vendor_id, day, end, service_id=service_id, capacity=capacity
        )
        availability = result.get(day)
        decision = decide(day, availability, is_past=day < today)

        alternatives: list[date] = []
        if not decision.selectable:
            alternatives = next_available_dates(
                result,
                after=max(day, today - timedelta(days=1)),
                today=today,
                limit=self.config.calendar.alternative_date_limit,
            )
        return DateCheck(
            date=day,
            vendor_id=vendor_id,
            pickable=decision.selectable,
            decision=decision,
            availability=availability,
            alternatives=alternatives,
            degraded=result.degraded,
        )

    async def list_off_days(self, vendor_id: str) -> list[OffDayRecord]:
        """All of the vendor's valid off-days, for management screens.

        Raises:
            DataUnavailableError: If the backend cannot be reached.
        """
        outcome = parse_off_days(await self.data_access.fetch_off_days(vendor_id))
        return outcome.records

    async def set_off_day(
        self,
        vendor_id: str,
        day: date,
        reason: str,
        *,
        is_recurring: bool = False,
        recurring_pattern: Optional[str] = None,
    ) -> None:
        """Declare an off-day.

        Raises:
            MutationFailure: If the backend does not confirm the change.
            ValueError: If the reason is empty or the pattern is unknown.
        """
        reason = reason.strip()
        if not reason:
            raise ValueError("An off-day needs a reason")
        pattern = RecurringPattern(recurring_pattern).value if recurring_pattern else None
        set_vendor_id(vendor_id)

        try:
            ok = await self.data_access.set_off_day(vendor_id, day, reason, is_recurring, pattern)
        except DataUnavailableError as e:
            raise MutationFailure(f"Could not set off-day on {day.isoformat()}: {e}") from e
        if not ok:
            raise MutationFailure(f"Backend rejected off-day on {day.isoformat()}")
        logger.info("Off-day declared for vendor %s on %s", vendor_id, day)

    async def remove_off_day(self, vendor_id: str, off_day_id: str) -> None:
        """Remove an off-day.

        Raises:
            MutationFailure: If the backend does not confirm the change.
        """
        set_vendor_id(vendor_id)
        try:
            ok = await self.data_access.remove_off_day(vendor_id, off_day_id)
        except DataUnavailableError as e:
            raise MutationFailure(f"Could not remove off-day {off_day_id}: {e}") from e
        if not ok:
            raise MutationFailure(f"Backend did not remove off-day {off_day_id}")
        logger.info("Off-day %s removed for vendor %s", off_day_id, vendor_id)

    async def set_off_days(self, vendor_id: str, requests: Iterable[OffDayRequest]) -> int:
        """Declare several off-days in one backend call.

        Returns the number created; dates that already had an off-day are
        skipped by the backend.

        Raises:
            MutationFailure: If the backend does not create any of them.
        """
        requests = list(requests)
        if not requests:
            return 0
        set_vendor_id(vendor_id)
        try:
            created = await self.data_access.set_off_days(vendor_id, requests)
        except DataUnavailableError as e:
            raise MutationFailure(f"Could not set {len(requests)} off-day(s): {e}") from e
        logger.info("Declared %d of %d off-day(s) for vendor %s", created, len(requests), vendor_id)
        return created
