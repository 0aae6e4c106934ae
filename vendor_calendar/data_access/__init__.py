from vendor_calendar.data_access.base import DataAccess, DataUnavailableError
from vendor_calendar.data_access.http_client import HttpDataAccess
from vendor_calendar.data_access.mock import MockDataAccess
from vendor_calendar.data_access.parsing import (
    ParseOutcome,
    RecordParseError,
    parse_booking,
    parse_bookings,
    parse_off_day,
    parse_off_days,
)

__all__ = [
    "DataAccess", "DataUnavailableError", "HttpDataAccess", "MockDataAccess",
    "ParseOutcome", "RecordParseError",
    "parse_booking", "parse_bookings", "parse_off_day", "parse_off_days",
]
