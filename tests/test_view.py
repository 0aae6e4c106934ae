"""Tests for date decisions, calendar rendering and month summaries."""

from datetime import date

import pytest

from vendor_calendar.calendar.aggregator import aggregate, build_day
from vendor_calendar.calendar.view import (
    DateCategory,
    build_calendar,
    decide,
    is_date_pickable,
    next_available_dates,
    summarize_month,
)
from vendor_calendar.schemas.booking_schema import BookingStatus

from tests.conftest import TODAY, VENDOR, make_booking, make_off_day

DAY = date(2025, 6, 15)


def availability(bookings=0, capacity=1, off_day=None):
    occupying = [make_booking(DAY, booking_id=str(i)) for i in range(bookings)]
    return build_day(DAY, occupying, capacity, off_day)


class TestDecide:
    def test_available(self):
        decision = decide(DAY, availability(), is_past=False)
        assert decision.selectable is True
        assert decision.category == DateCategory.AVAILABLE
        assert decision.label == "Available"

    def test_partial(self):
        decision = decide(DAY, availability(bookings=1, capacity=3), is_past=False)
        assert decision.selectable is True
        assert decision.category == DateCategory.PARTIAL
        assert decision.label == "1/3 booked"

    def test_fully_booked(self):
        decision = decide(DAY, availability(bookings=1), is_past=False)
        assert decision.selectable is False
        assert decision.category == DateCategory.FULLY_BOOKED
        assert decision.label == "Fully booked (1/1 booked)"

    def test_off_day(self):
        decision = decide(DAY, availability(off_day=make_off_day(DAY, reason="Holiday")), is_past=False)
        assert decision.selectable is False
        assert decision.category == DateCategory.OFF
        assert decision.label == "Off day: Holiday"

    def test_off_day_with_empty_reason(self):
        decision = decide(DAY, availability(off_day=make_off_day(DAY, reason="")), is_past=False)
        assert decision.label == "Off day"

    @pytest.mark.parametrize("avail", [
        None,
        availability(),
        availability(bookings=1, capacity=3),
        availability(bookings=1),
        availability(off_day=make_off_day(DAY)),
    ])
    def test_past_never_selectable(self, avail):
        decision = decide(DAY, avail, is_past=True)
        assert decision.selectable is False
        assert decision.category == DateCategory.PAST
        assert decision.label.startswith("Past date")

    @pytest.mark.parametrize("avail, label", [
        (None, "Past date"),
        (availability(), "Past date (available)"),
        (availability(bookings=1, capacity=3), "Past date (1/3 booked)"),
        (availability(bookings=1), "Past date (fully booked 1/1)"),
        (availability(off_day=make_off_day(DAY)), "Past date (off day)"),
    ])
    def test_past_label_keeps_status(self, avail, label):
        assert decide(DAY, avail, is_past=True).label == label

    def test_available_mentions_pending_requests(self):
        decision = decide(DAY, build_day(DAY, [], 1, pending=1), is_past=False)
        assert decision.selectable is True
        assert decision.category == DateCategory.AVAILABLE
        assert decision.label == "Available with 1 pending request"

    def test_partial_mentions_pending_requests(self):
        occupying = [make_booking(DAY, booking_id="A")]
        decision = decide(DAY, build_day(DAY, occupying, 3, pending=2), is_past=False)
        assert decision.category == DateCategory.PARTIAL
        assert decision.label == "1/3 booked, 2 pending requests"

    def test_missing_availability_is_loading_and_selectable(self):
        decision = decide(DAY, None, is_past=False)
        assert decision.selectable is True
        assert decision.loading is True
        assert decision.category == DateCategory.LOADING

    def test_selection_does_not_change_selectability(self):
        avail = availability(bookings=1)
        assert decide(DAY, avail, is_past=False, is_selected=True) == decide(DAY, avail, is_past=False)


class TestIsDatePickable:
    def test_today_is_not_past(self):
        assert is_date_pickable(TODAY, build_day(TODAY, [], 1), today=TODAY) is True

    def test_yesterday_is_past(self):
        yesterday = date(2025, 6, 9)
        assert is_date_pickable(yesterday, build_day(yesterday, [], 1), today=TODAY) is False

    def test_fully_booked_rejected(self):
        assert is_date_pickable(DAY, availability(bookings=1), today=TODAY) is False


class TestBuildCalendar:
    def setup_method(self):
        self.result = aggregate(
            VENDOR, date(2025, 6, 1), date(2025, 7, 12),
            [make_booking(date(2025, 6, 15))],
            [make_off_day(date(2025, 6, 20))],
        )

    def test_42_cells_with_decisions(self):
        days = build_calendar(date(2025, 6, 1), self.result, today=TODAY)
        assert len(days) == 42
        by_date = {d.date: d for d in days}
        assert by_date[date(2025, 6, 15)].decision.category == DateCategory.FULLY_BOOKED
        assert by_date[date(2025, 6, 20)].decision.category == DateCategory.OFF
        assert by_date[date(2025, 6, 11)].decision.category == DateCategory.AVAILABLE

    def test_past_dates_blocked(self):
        days = build_calendar(date(2025, 6, 1), self.result, today=TODAY)
        past = [d for d in days if d.date < TODAY]
        assert len(past) == 9
        assert all(d.is_past and not d.decision.selectable for d in past)

    def test_flags(self):
        days = build_calendar(date(2025, 6, 1), self.result, today=TODAY, selected=date(2025, 6, 12))
        by_date = {d.date: d for d in days}
        assert by_date[TODAY].is_today
        assert by_date[date(2025, 6, 12)].is_selected
        assert by_date[date(2025, 7, 1)].is_current_month is False
        assert by_date[date(2025, 6, 12)].day == 12

    def test_without_result_everything_loading(self):
        days = build_calendar(date(2025, 6, 1), None, today=date(2025, 1, 1))
        assert all(d.decision.loading for d in days)
        assert all(d.availability is None for d in days)


class TestSummarizeMonth:
    def test_counts(self):
        result = aggregate(
            VENDOR, date(2025, 6, 1), date(2025, 6, 30),
            [
                make_booking(date(2025, 6, 15), booking_id="A"),
                make_booking(date(2025, 6, 16), booking_id="B"),
                make_booking(date(2025, 6, 16), booking_id="C"),
                make_booking(date(2025, 6, 17), BookingStatus.PENDING, booking_id="D"),
            ],
            [make_off_day(date(2025, 6, 20))],
            capacity=2,
        )
        summary = summarize_month(date(2025, 6, 1), result)
        assert (summary.year, summary.month) == (2025, 6)
        assert summary.partially_booked_days == 1
        assert summary.fully_booked_days == 1
        assert summary.off_days == 1
        assert summary.available_days == 27
        assert summary.unknown_days == 0
        assert summary.total_bookings == 3

    def test_dates_outside_result_are_unknown(self):
        result = aggregate(VENDOR, date(2025, 6, 1), date(2025, 6, 10), [], [])
        summary = summarize_month(date(2025, 6, 1), result)
        assert summary.available_days == 10
        assert summary.unknown_days == 20


class TestNextAvailableDates:
    def test_skips_blocked_dates(self):
        result = aggregate(
            VENDOR, date(2025, 6, 10), date(2025, 6, 30),
            [make_booking(date(2025, 6, 16))],
            [make_off_day(date(2025, 6, 17))],
        )
        found = next_available_dates(result, after=date(2025, 6, 15), today=TODAY)
        assert found == [date(2025, 6, 18), date(2025, 6, 19), date(2025, 6, 20)]

    def test_limit(self):
        result = aggregate(VENDOR, date(2025, 6, 10), date(2025, 6, 30), [], [])
        assert len(next_available_dates(result, after=TODAY, today=TODAY, limit=5)) == 5

    def test_never_returns_past_dates(self):
        result = aggregate(VENDOR, date(2025, 6, 1), date(2025, 6, 30), [], [])
        found = next_available_dates(result, after=date(2025, 6, 1), today=TODAY)
        assert found == [date(2025, 6, 10), date(2025, 6, 11), date(2025, 6, 12)]
