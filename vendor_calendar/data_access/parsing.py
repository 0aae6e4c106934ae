"""
Strict parsing of backend payloads into calendar records.

Each record is parsed on its own. ``parse_booking`` / ``parse_off_day``
raise RecordParseError for a bad record; the batch helpers skip and log
bad records so one malformed booking never blanks a whole month.

The backend mixes snake_case and camelCase field names, so each field
has an explicit, ordered list of accepted keys.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Generic, Iterable, Optional, TypeVar

from pydantic import ValidationError

from vendor_calendar.schemas.booking_schema import BookingRecord
from vendor_calendar.schemas.off_day_schema import (
    DEFAULT_OFF_DAY_REASON,
    OffDayRecord,
    OffDayRequest,
)
from vendor_calendar.utils import parse_date_key

logger = logging.getLogger(__name__)

T = TypeVar("T")

BOOKING_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "booking_id", "bookingId"),
    "vendor_id": ("vendor_id", "vendorId"),
    "service_id": ("service_id", "serviceId"),
    "event_date": ("event_date", "eventDate"),
    "status": ("status",),
    "client_name": ("client_name", "clientName", "couple_name", "coupleName"),
    "service_name": ("service_name", "serviceName", "service_type", "serviceType"),
}

OFF_DAY_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "vendor_id": ("vendor_id", "vendorId"),
    "date": ("date",),
    "reason": ("reason",),
    "is_recurring": ("is_recurring", "isRecurring"),
    "recurring_pattern": ("recurring_pattern", "recurringPattern"),
    "recurring_end_date": ("recurring_end_date", "recurringEndDate"),
}

_DATE_FIELDS = ("event_date", "date", "recurring_end_date")


class RecordParseError(ValueError):
    """Raised when a single backend record cannot be turned into a record."""

    def __init__(self, kind: str, message: str, raw: Any = None) -> None:
        super().__init__(f"Invalid {kind} record: {message}")
        self.kind = kind
        self.raw = raw


@dataclass
class ParseOutcome(Generic[T]):
    """Records that parsed plus the errors for the ones that did not."""
    records: list[T] = field(default_factory=list)
    errors: list[RecordParseError] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.errors)


def _pick(raw: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _normalize(kind: str, raw: Any, fields: dict[str, tuple[str, ...]]) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise RecordParseError(kind, f"expected an object, got {type(raw).__name__}", raw)

    data: dict[str, Any] = {}
    for name, keys in fields.items():
        value = _pick(raw, keys)
        if value is None:
            continue
        if name in _DATE_FIELDS:
            try:
                value = parse_date_key(value)
            except (TypeError, ValueError) as e:
                raise RecordParseError(kind, f"bad {name} {value!r} ({e})", raw) from None
        elif name in ("id", "vendor_id", "service_id"):
            value = str(value)
        elif name in ("status", "recurring_pattern") and isinstance(value, str):
            value = value.strip().lower()
        data[name] = value
    return data


def parse_booking(raw: Any) -> BookingRecord:
    """Parse one booking payload.

    Raises:
        RecordParseError: If required fields are missing or invalid.
    """
    data = _normalize("booking", raw, BOOKING_FIELDS)
    try:
        return BookingRecord(**data)
    except ValidationError as e:
        raise RecordParseError("booking", _summarize(e), raw) from None


def parse_off_day(raw: Any) -> OffDayRecord:
    """Parse one off-day payload.

    Raises:
        RecordParseError: If required fields are missing or invalid.
    """
    data = _normalize("off-day", raw, OFF_DAY_FIELDS)
    if not data.get("reason"):
        data["reason"] = DEFAULT_OFF_DAY_REASON
    try:
        return OffDayRecord(**data)
    except ValidationError as e:
        raise RecordParseError("off-day", _summarize(e), raw) from None


def _summarize(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
        for err in error.errors()
    )


def _parse_many(items: Iterable[Any], parser, kind: str) -> ParseOutcome:
    outcome: ParseOutcome = ParseOutcome()
    for index, raw in enumerate(items):
        try:
            outcome.records.append(parser(raw))
        except RecordParseError as e:
            outcome.errors.append(e)
            logger.warning("Skipping %s #%d: %s", kind, index, e)
    return outcome


def parse_bookings(items: Iterable[Any]) -> ParseOutcome[BookingRecord]:
    return _parse_many(items, parse_booking, "booking")


def parse_off_days(items: Iterable[Any]) -> ParseOutcome[OffDayRecord]:
    return _parse_many(items, parse_off_day, "off-day")


def serialize_off_day_request(
    day: Any,
    reason: str,
    is_recurring: bool,
    recurring_pattern: Optional[str],
    recurring_end_date: Optional[date] = None,
) -> dict[str, Any]:
    """Request body for creating an off-day, in the backend's field names."""
    body: dict[str, Any] = {
        "date": parse_date_key(day).isoformat(),
        "reason": reason,
        "isRecurring": is_recurring,
    }
    if recurring_pattern:
        body["recurringPattern"] = recurring_pattern
    if recurring_end_date is not None:
        body["recurringEndDate"] = recurring_end_date.isoformat()
    return body


def serialize_bulk_request(requests: Iterable[OffDayRequest]) -> list[dict[str, Any]]:
    """Off-day bodies for the bulk endpoint, one per request."""
    return [
        serialize_off_day_request(
            r.date,
            r.reason,
            r.is_recurring,
            r.recurring_pattern.value if r.recurring_pattern else None,
            r.recurring_end_date,
        )
        for r in requests
    ]
