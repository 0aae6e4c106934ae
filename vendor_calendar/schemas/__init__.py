from vendor_calendar.schemas.availability_schema import (
    AvailabilityResult,
    DayAvailability,
    DayStatus,
)
from vendor_calendar.schemas.booking_schema import (
    DEFAULT_OCCUPYING_STATUSES,
    BookingRecord,
    BookingStatus,
)
from vendor_calendar.schemas.off_day_schema import OffDayRecord, OffDayRequest, RecurringPattern

__all__ = [
    "AvailabilityResult", "DayAvailability", "DayStatus",
    "BookingRecord", "BookingStatus", "DEFAULT_OCCUPYING_STATUSES",
    "OffDayRecord", "OffDayRequest", "RecurringPattern",
]
