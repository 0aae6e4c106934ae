"""Tests for calendar session loading, supersession and mutations."""

import asyncio
from datetime import date

import pytest

from vendor_calendar.calendar.view import DateCategory
from vendor_calendar.data_access.mock import MockDataAccess
from vendor_calendar.schemas.availability_schema import DayStatus
from vendor_calendar.schemas.off_day_schema import OffDayRequest
from vendor_calendar.service import AvailabilityService, MutationFailure
from vendor_calendar.session import CalendarSession

from tests.conftest import TODAY, VENDOR, booking_payload

JUNE = date(2025, 6, 1)
JULY = date(2025, 7, 1)


class GatedDataAccess(MockDataAccess):
    """Mock backend whose booking fetches wait until released per range start."""

    def __init__(self):
        super().__init__()
        self.gates: dict[date, asyncio.Event] = {}

    def gate(self, start: date) -> asyncio.Event:
        return self.gates.setdefault(start, asyncio.Event())

    async def fetch_bookings(self, vendor_id, start, end, service_id=None):
        await self.gate(start).wait()
        return await super().fetch_bookings(vendor_id, start, end, service_id)


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


class TestShowMonth:
    @pytest.mark.asyncio
    async def test_loads_grid_range(self, backend, service):
        session = CalendarSession(service, VENDOR)
        result = await session.show_month(date(2025, 6, 18))

        assert result is session.result
        assert session.month_anchor == JUNE
        assert (result.start, result.end) == (date(2025, 6, 1), date(2025, 7, 12))
        assert len(session.days(today=TODAY)) == 42

    @pytest.mark.asyncio
    async def test_days_reflect_bookings(self, backend, service):
        backend.add_booking(**booking_payload("2025-06-15"))
        session = CalendarSession(service, VENDOR)
        await session.show_month(JUNE)

        by_date = {d.date: d for d in session.days(today=TODAY)}
        assert by_date[date(2025, 6, 15)].decision.category == DateCategory.FULLY_BOOKED
        assert by_date[date(2025, 6, 5)].decision.category == DateCategory.PAST

    @pytest.mark.asyncio
    async def test_navigation(self, service):
        session = CalendarSession(service, VENDOR)
        await session.show_month(JUNE)
        await session.next_month()
        assert session.month_anchor == JULY
        await session.previous_month()
        await session.previous_month()
        assert session.month_anchor == date(2025, 5, 1)

    def test_days_before_first_request(self, service):
        session = CalendarSession(service, VENDOR)
        with pytest.raises(RuntimeError):
            session.days()

    @pytest.mark.asyncio
    async def test_degraded_flag(self, backend, service):
        backend.fail_reads = True
        session = CalendarSession(service, VENDOR)
        await session.show_month(JUNE)
        assert session.is_degraded is True
        assert all(d.decision.selectable for d in session.days(today=date(2025, 1, 1)))

    @pytest.mark.asyncio
    async def test_summary(self, backend, service):
        backend.add_booking(**booking_payload("2025-06-15"))
        session = CalendarSession(service, VENDOR)
        assert session.summary() is None
        await session.show_month(JUNE)
        summary = session.summary()
        assert summary.fully_booked_days == 1
        assert summary.available_days == 29


class TestStaleResponses:
    @pytest.mark.asyncio
    async def test_superseded_response_discarded(self, config):
        backend = GatedDataAccess()
        backend.add_booking(**booking_payload("2025-06-15"))
        backend.add_booking(**booking_payload("2025-07-15"))
        session = CalendarSession(AvailabilityService(backend, config), VENDOR)

        june_task = asyncio.create_task(session.show_month(JUNE))
        await settle()
        july_task = asyncio.create_task(session.show_month(JULY))
        await settle()

        # July resolves first, then the older June response arrives.
        backend.gate(date(2025, 6, 29)).set()
        assert await july_task is not None
        backend.gate(date(2025, 6, 1)).set()
        assert await june_task is None

        assert session.month_anchor == JULY
        assert session.result.start == date(2025, 6, 29)
        by_date = {d.date: d for d in session.days(today=TODAY)}
        assert by_date[date(2025, 7, 15)].decision.category == DateCategory.FULLY_BOOKED

    @pytest.mark.asyncio
    async def test_superseded_response_arriving_first_not_applied(self, config):
        backend = GatedDataAccess()
        session = CalendarSession(AvailabilityService(backend, config), VENDOR)

        june_task = asyncio.create_task(session.show_month(JUNE))
        await settle()
        july_task = asyncio.create_task(session.show_month(JULY))
        await settle()

        backend.gate(date(2025, 6, 1)).set()
        assert await june_task is None
        assert session.result is None
        assert all(d.decision.loading for d in session.days(today=TODAY))

        backend.gate(date(2025, 6, 29)).set()
        await july_task
        assert session.month_anchor == JULY

    @pytest.mark.asyncio
    async def test_debounce_collapses_rapid_navigation(self, backend, service):
        session = CalendarSession(service, VENDOR, debounce_ms=20)

        results = await asyncio.gather(
            session.show_month(JUNE),
            session.show_month(JULY),
            session.show_month(date(2025, 8, 1)),
        )

        assert results[0] is None and results[1] is None
        assert results[2] is not None
        assert len(backend.booking_queries) == 1
        assert session.month_anchor == date(2025, 8, 1)

    @pytest.mark.asyncio
    async def test_vendor_change_drops_previous_data(self, config):
        backend = GatedDataAccess()
        backend.add_booking(**booking_payload("2025-06-15"))
        backend.add_booking(**booking_payload("2025-06-16", vendor_id="V2"))
        backend.gate(JUNE).set()
        session = CalendarSession(AvailabilityService(backend, config), VENDOR)
        await session.show_month(JUNE)

        backend.gate(JUNE).clear()
        change = asyncio.create_task(session.change_vendor("V2"))
        await settle()
        assert session.result is None

        backend.gate(JUNE).set()
        await change
        assert session.vendor_id == "V2"
        assert session.result.vendor_id == "V2"
        assert session.result.days[date(2025, 6, 15)].status == DayStatus.AVAILABLE
        assert session.result.days[date(2025, 6, 16)].status == DayStatus.FULLY_BOOKED

    @pytest.mark.asyncio
    async def test_vendor_change_before_any_request(self, service):
        session = CalendarSession(service, VENDOR)
        assert await session.change_vendor("V2") is None
        assert session.vendor_id == "V2"


class TestMutations:
    @pytest.mark.asyncio
    async def test_add_off_day_refreshes(self, service):
        session = CalendarSession(service, VENDOR)
        await session.show_month(JUNE)

        result = await session.add_off_day(date(2025, 6, 20), "Holiday")

        assert result.days[date(2025, 6, 20)].status == DayStatus.OFF_DAY
        by_date = {d.date: d for d in session.days(today=TODAY)}
        assert by_date[date(2025, 6, 20)].decision.label == "Off day: Holiday"

    @pytest.mark.asyncio
    async def test_remove_off_day_refreshes(self, backend, service):
        off = backend.add_off_day(VENDOR, date="2025-06-20", reason="Holiday")
        session = CalendarSession(service, VENDOR)
        await session.show_month(JUNE)
        assert session.result.days[date(2025, 6, 20)].status == DayStatus.OFF_DAY

        await session.remove_off_day(off["id"])

        assert session.result.days[date(2025, 6, 20)].status == DayStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_failed_mutation_leaves_state_untouched(self, backend, service):
        session = CalendarSession(service, VENDOR)
        before = await session.show_month(JUNE)
        generation = session.generation
        backend.fail_writes = True

        with pytest.raises(MutationFailure):
            await session.add_off_day(date(2025, 6, 20), "Holiday")

        assert session.result is before
        assert session.generation == generation
        assert session.result.days[date(2025, 6, 20)].status == DayStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_recurring_off_day(self, service):
        session = CalendarSession(service, VENDOR)
        await session.show_month(JUNE)
        await session.add_off_day(date(2025, 6, 2), "Rest day", is_recurring=True, recurring_pattern="weekly")
        summary = session.summary()
        assert summary.off_days == 5

    @pytest.mark.asyncio
    async def test_add_off_day_before_any_month_keeps_backend_change(self, backend, service):
        session = CalendarSession(service, VENDOR)

        assert await session.add_off_day(date(2025, 6, 20), "Holiday") is None

        off_days = await backend.fetch_off_days(VENDOR)
        assert [o["date"] for o in off_days] == ["2025-06-20"]
        assert session.result is None

    @pytest.mark.asyncio
    async def test_remove_off_day_before_any_month_keeps_backend_change(self, backend, service):
        off = backend.add_off_day(VENDOR, date="2025-06-20", reason="Holiday")
        session = CalendarSession(service, VENDOR)

        assert await session.remove_off_day(off["id"]) is None

        assert await backend.fetch_off_days(VENDOR) == []

    @pytest.mark.asyncio
    async def test_add_off_days_refreshes(self, service):
        session = CalendarSession(service, VENDOR)
        await session.show_month(JUNE)

        result = await session.add_off_days([
            OffDayRequest(date=date(2025, 6, 20), reason="Holiday"),
            OffDayRequest(date=date(2025, 6, 21), reason="Holiday"),
        ])

        assert result.days[date(2025, 6, 20)].status == DayStatus.OFF_DAY
        assert result.days[date(2025, 6, 21)].status == DayStatus.OFF_DAY
        assert session.summary().off_days == 2

    @pytest.mark.asyncio
    async def test_add_off_days_before_any_month(self, backend, service):
        session = CalendarSession(service, VENDOR)
        assert await session.add_off_days([OffDayRequest(date=date(2025, 6, 20))]) is None
        assert len(await backend.fetch_off_days(VENDOR)) == 1
