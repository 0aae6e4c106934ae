"""Shared test fixtures and helpers."""

from datetime import date
from typing import Optional

import pytest

from vendor_calendar.config import AppConfig, CalendarConfig
from vendor_calendar.data_access.mock import MockDataAccess
from vendor_calendar.schemas.booking_schema import BookingRecord, BookingStatus
from vendor_calendar.schemas.off_day_schema import OffDayRecord, RecurringPattern
from vendor_calendar.service import AvailabilityService

TODAY = date(2025, 6, 10)
VENDOR = "V1"


@pytest.fixture
def config():
    return AppConfig(calendar=CalendarConfig(debounce_ms=0))


@pytest.fixture
def backend():
    store = MockDataAccess()
    yield store
    store.reset()


@pytest.fixture
def service(backend, config):
    return AvailabilityService(backend, config)


def make_booking(
    event_date: date,
    status: BookingStatus = BookingStatus.CONFIRMED,
    vendor_id: str = VENDOR,
    service_id: Optional[str] = None,
    booking_id: Optional[str] = None,
) -> BookingRecord:
    """Helper to create a BookingRecord."""
    return BookingRecord(
        id=booking_id or f"BK-{event_date.isoformat()}-{status.value}",
        vendor_id=vendor_id,
        service_id=service_id,
        event_date=event_date,
        status=status,
        client_name="Maria & Jose",
        service_name="Photography",
    )


def make_off_day(
    day: date,
    reason: str = "Holiday",
    vendor_id: str = VENDOR,
    pattern: Optional[RecurringPattern] = None,
    end: Optional[date] = None,
    off_day_id: Optional[str] = None,
) -> OffDayRecord:
    """Helper to create an OffDayRecord; a pattern makes it recurring."""
    return OffDayRecord(
        id=off_day_id or f"OFF-{day.isoformat()}",
        vendor_id=vendor_id,
        date=day,
        reason=reason,
        is_recurring=pattern is not None,
        recurring_pattern=pattern,
        recurring_end_date=end,
    )


def booking_payload(event_date: str, status: str = "confirmed", **extra) -> dict:
    """Helper to create a raw booking payload as the backend sends it."""
    payload = {
        "vendor_id": VENDOR,
        "event_date": event_date,
        "status": status,
        "client_name": "Ana & Paolo",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def manila_zone(monkeypatch):
    """Pin the reference timezone used when parsing backend timestamps."""
    pinned = AppConfig(calendar=CalendarConfig(timezone="Asia/Manila"))
    monkeypatch.setattr("vendor_calendar.utils.settings", pinned)
    return pinned
