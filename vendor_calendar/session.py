"""
Per-calendar loading state with request supersession.

A CalendarSession belongs to one calendar on screen. Every navigation or
vendor change bumps a generation counter; a load only applies its result
if its generation is still the latest when the data arrives, so the last
requested range always wins and stale responses are dropped.

Usage:
    session = CalendarSession(service, "V1")
    await session.show_month(date(2025, 6, 1))
    await session.show_month(date(2025, 7, 1))   # supersedes anything in flight
    cells = session.days(today=date(2025, 6, 10))
"""

import asyncio
from datetime import date
from typing import Iterable, Optional

from vendor_calendar.calendar.grid import first_of_month, grid_range, shift_month
from vendor_calendar.calendar.view import (
    CalendarDay,
    MonthSummary,
    build_calendar,
    summarize_month,
)
from vendor_calendar.logging_context import get_vendor_logger
from vendor_calendar.schemas.availability_schema import AvailabilityResult
from vendor_calendar.schemas.off_day_schema import OffDayRequest
from vendor_calendar.service import AvailabilityService

logger = get_vendor_logger(__name__)


class CalendarSession:
    """Owns the availability map of a single calendar component."""

    def __init__(
        self,
        service: AvailabilityService,
        vendor_id: str,
        *,
        service_id: Optional[str] = None,
        capacity: Optional[int] = None,
        debounce_ms: Optional[int] = None,
    ) -> None:
        self.service = service
        self.vendor_id = vendor_id
        self.service_id = service_id
        self.capacity = capacity
        if debounce_ms is None:
            debounce_ms = service.config.calendar.debounce_ms
        self.debounce_seconds = debounce_ms / 1000
        self._generation = 0
        self._requested_anchor: Optional[date] = None
        self._month_anchor: Optional[date] = None
        self._result: Optional[AvailabilityResult] = None
        self._mutation_lock = asyncio.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def requested_anchor(self) -> Optional[date]:
        return self._requested_anchor

    @property
    def month_anchor(self) -> Optional[date]:
        return self._month_anchor

    @property
    def result(self) -> Optional[AvailabilityResult]:
        return self._result

    @property
    def is_degraded(self) -> bool:
        return self._result is not None and self._result.degraded

    async def show_month(self, anchor: date, *, debounce: bool = True) -> Optional[AvailabilityResult]:
        """Request availability for the month containing ``anchor``.

        Returns the applied result, or None if a newer request superseded
        this one before its data arrived.
        """
        self._generation += 1
        generation = self._generation
        anchor = first_of_month(anchor)
        self._requested_anchor = anchor
        vendor_id, service_id = self.vendor_id, self.service_id

        if debounce and self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
            if generation != self._generation:
                logger.debug("Request %d for %s debounced away", generation, anchor)
                return None

        start, end = grid_range(anchor)
        result = await self.service.load(
            vendor_id, start, end, service_id=service_id, capacity=self.capacity
        )

        if generation != self._generation:
            logger.debug(
                "Discarding stale response %d for %s (latest is %d)",
                generation, anchor, self._generation,
            )
            return None

        self._month_anchor = anchor
        self._result = result
        return result

    async def next_month(self) -> Optional[AvailabilityResult]:
        return await self.show_month(shift_month(self._current_anchor(), 1))

    async def previous_month(self) -> Optional[AvailabilityResult]:
        return await self.show_month(shift_month(self._current_anchor(), -1))

    async def change_vendor(
        self, vendor_id: str, *, service_id: Optional[str] = None
    ) -> Optional[AvailabilityResult]:
        """Switch vendor; the previous vendor's data is dropped immediately."""
        self.vendor_id = vendor_id
        self.service_id = service_id
        self._result = None
        self._month_anchor = None
        if self._requested_anchor is None:
            return None
        return await self.show_month(self._requested_anchor)

    async def refresh(self) -> Optional[AvailabilityResult]:
        return await self.show_month(self._current_anchor(), debounce=False)

    async def _refresh_after_mutation(self) -> Optional[AvailabilityResult]:
        # No month requested yet, so nothing to redraw.
        if self._requested_anchor is None:
            return None
        return await self.refresh()

    async def add_off_day(
        self,
        day: date,
        reason: str,
        *,
        is_recurring: bool = False,
        recurring_pattern: Optional[str] = None,
    ) -> Optional[AvailabilityResult]:
        """Declare an off-day, then re-aggregate the displayed month.

        Raises:
            MutationFailure: If the backend does not confirm; the displayed
                state is left untouched.
        """
        async with self._mutation_lock:
            await self.service.set_off_day(
                self.vendor_id,
                day,
                reason,
                is_recurring=is_recurring,
                recurring_pattern=recurring_pattern,
            )
            return await self._refresh_after_mutation()

    async def add_off_days(self, requests: Iterable[OffDayRequest]) -> Optional[AvailabilityResult]:
        """Declare several off-days at once, then re-aggregate the displayed month.

        Raises:
            MutationFailure: If the backend creates none of them.
        """
        async with self._mutation_lock:
            await self.service.set_off_days(self.vendor_id, requests)
            return await self._refresh_after_mutation()

    async def remove_off_day(self, off_day_id: str) -> Optional[AvailabilityResult]:
        """Remove an off-day, then re-aggregate the displayed month.

        Raises:
            MutationFailure: If the backend does not confirm.
        """
        async with self._mutation_lock:
            await self.service.remove_off_day(self.vendor_id, off_day_id)
            return await self._refresh_after_mutation()

    def days(self, *, today: Optional[date] = None, selected: Optional[date] = None) -> list[CalendarDay]:
        """Grid cells for the requested month; cells are "loading" until its data arrives."""
        anchor = self._current_anchor()
        result = self._result if self._month_anchor == anchor else None
        return build_calendar(anchor, result, today=today, selected=selected)

    def summary(self) -> Optional[MonthSummary]:
        if self._result is None or self._month_anchor is None:
            return None
        return summarize_month(self._month_anchor, self._result)

    def _current_anchor(self) -> date:
        if self._requested_anchor is not None:
            return self._requested_anchor
        raise RuntimeError("No month has been requested yet")
