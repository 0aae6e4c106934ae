"""Computed availability models. Never persisted; rebuilt on every load."""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DayStatus(str, Enum):
    AVAILABLE = "available"
    PARTIALLY_BOOKED = "partially_booked"
    FULLY_BOOKED = "fully_booked"
    OFF_DAY = "off_day"


def pending_note(count: int) -> str:
    return f"{count} pending request{'s' if count != 1 else ''}"


class DayAvailability(BaseModel):
    """Aggregated availability of one vendor on one date."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    is_available: bool
    current_bookings: int = 0
    pending_bookings: int = 0
    max_bookings_per_day: int = 1
    status: DayStatus
    reason: Optional[str] = None
    booking_ids: tuple[str, ...] = ()
    off_day_id: Optional[str] = None

    @property
    def remaining_capacity(self) -> int:
        if self.status == DayStatus.OFF_DAY:
            return 0
        return max(self.max_bookings_per_day - self.current_bookings, 0)


class AvailabilityResult(BaseModel):
    """Per-date availability for a vendor over an inclusive date range.

    ``degraded`` is set when the backend could not be reached and every
    date was reported available instead of blocking the calendar.
    """

    model_config = ConfigDict(frozen=True)

    vendor_id: str
    service_id: Optional[str] = None
    start: dt.date
    end: dt.date
    days: dict[dt.date, DayAvailability] = Field(default_factory=dict)
    degraded: bool = False
    warnings: list[str] = Field(default_factory=list)
    skipped_records: int = 0

    def get(self, day: dt.date) -> Optional[DayAvailability]:
        return self.days.get(day)

    def unavailable_dates(self) -> list[dt.date]:
        return [d for d, a in self.days.items() if not a.is_available]
