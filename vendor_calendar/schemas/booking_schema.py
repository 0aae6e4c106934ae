"""Booking records as consumed by the availability calendar."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


# Pending requests do not block other clients from seeing the date.
DEFAULT_OCCUPYING_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
)


class BookingRecord(BaseModel):
    """One booking occupying (or having occupied) a vendor's day."""

    model_config = ConfigDict(frozen=True)

    id: str
    vendor_id: str
    service_id: Optional[str] = None
    event_date: date
    status: BookingStatus
    client_name: str = ""
    service_name: str = ""
