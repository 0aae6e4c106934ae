"""
In-memory data access with generated demo bookings.

Used when the backend is unavailable in development (USE_MOCK_DATA=true),
by the console entry point, and by tests. Generated data is seeded so the
same vendor always gets the same bookings.
"""

import logging
import random
import uuid
from datetime import date, timedelta
from typing import Any, Optional

from vendor_calendar.data_access.base import DataAccess, DataUnavailableError
from vendor_calendar.data_access.parsing import serialize_bulk_request, serialize_off_day_request
from vendor_calendar.schemas.off_day_schema import OffDayRequest
from vendor_calendar.utils import parse_date_key

logger = logging.getLogger(__name__)

# Demo generation parameters
DEMO_DAYS = 120
BOOKING_PROBABILITY = 0.2
DEMO_SEED = 42

DEMO_STATUSES = ["confirmed", "confirmed", "in_progress", "pending", "cancelled"]
DEMO_CLIENTS = ["Maria & Jose", "Ana & Paolo", "Grace & Mark", "Liza & Ben", "Joy & Carlo"]
DEMO_SERVICES = {"SVC-PHOTO": "Photography", "SVC-VIDEO": "Videography"}


def generate_demo_bookings(
    vendor_id: str,
    start: date,
    days: int = DEMO_DAYS,
    seed: int = DEMO_SEED,
) -> list[dict[str, Any]]:
    """Generate a deterministic spread of bookings in the backend's format."""
    rng = random.Random(f"{seed}:{vendor_id}")
    bookings: list[dict[str, Any]] = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        if rng.random() >= BOOKING_PROBABILITY:
            continue
        service_id = rng.choice(list(DEMO_SERVICES))
        bookings.append({
            "id": f"BK-{vendor_id}-{offset:03d}",
            "vendor_id": vendor_id,
            "service_id": service_id,
            "event_date": day.isoformat(),
            "status": rng.choice(DEMO_STATUSES),
            "client_name": rng.choice(DEMO_CLIENTS),
            "service_name": DEMO_SERVICES[service_id],
        })
    return bookings


def _matches(
    raw: Any, vendor_id: str, start: date, end: date, service_id: Optional[str]
) -> bool:
    # Payloads without a usable shape are passed through for the parser to reject.
    if not isinstance(raw, dict):
        return True
    if raw.get("vendor_id", vendor_id) != vendor_id:
        return False
    if service_id is not None and raw.get("service_id") != service_id:
        return False
    try:
        day = parse_date_key(raw.get("event_date"))
    except (TypeError, ValueError):
        return True
    return start <= day <= end


class MockDataAccess(DataAccess):
    """Dict-backed store implementing the data-access contract.

    ``fail_reads`` / ``fail_writes`` simulate an unreachable backend.
    """

    def __init__(self) -> None:
        self._bookings: list[dict[str, Any]] = []
        self._off_days: dict[str, list[dict[str, Any]]] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.booking_queries: list[tuple[str, date, date, Optional[str]]] = []

    def add_booking(self, **booking: Any) -> dict[str, Any]:
        booking.setdefault("id", f"BK-{uuid.uuid4().hex[:6].upper()}")
        self._bookings.append(booking)
        return booking

    def add_raw_booking(self, raw: Any) -> None:
        """Store a payload as-is, e.g. to simulate a malformed record."""
        self._bookings.append(raw)

    def add_off_day(self, vendor_id: str, **off_day: Any) -> dict[str, Any]:
        off_day.setdefault("id", f"OFF-{uuid.uuid4().hex[:6].upper()}")
        off_day["vendorId"] = vendor_id
        self._off_days.setdefault(vendor_id, []).append(off_day)
        return off_day

    def _has_off_day(self, vendor_id: str, day_key: str) -> bool:
        return any(o.get("date") == day_key for o in self._off_days.get(vendor_id, []))

    def seed_demo(self, vendor_id: str, start: date, days: int = DEMO_DAYS) -> int:
        """Fill the store with generated bookings for a vendor."""
        generated = generate_demo_bookings(vendor_id, start, days)
        self._bookings.extend(generated)
        logger.info("Seeded %d demo booking(s) for vendor %s", len(generated), vendor_id)
        return len(generated)

    async def fetch_bookings(
        self,
        vendor_id: str,
        start: date,
        end: date,
        service_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        self.booking_queries.append((vendor_id, start, end, service_id))
        if self.fail_reads:
            raise DataUnavailableError("Mock backend is unavailable")
        return [
            dict(raw) if isinstance(raw, dict) else raw
            for raw in self._bookings
            if _matches(raw, vendor_id, start, end, service_id)
        ]

    async def fetch_off_days(self, vendor_id: str) -> list[dict[str, Any]]:
        if self.fail_reads:
            raise DataUnavailableError("Mock backend is unavailable")
        return [dict(o) for o in self._off_days.get(vendor_id, [])]

    async def set_off_day(
        self,
        vendor_id: str,
        day: date,
        reason: str,
        is_recurring: bool = False,
        recurring_pattern: Optional[str] = None,
    ) -> bool:
        if self.fail_writes:
            raise DataUnavailableError("Mock backend is unavailable")
        body = serialize_off_day_request(day, reason, is_recurring, recurring_pattern)
        if self._has_off_day(vendor_id, body["date"]):
            logger.info("Off-day already set for vendor %s on %s", vendor_id, day)
            return True
        self.add_off_day(vendor_id, **body)
        logger.info("Off-day set for vendor %s on %s", vendor_id, day)
        return True

    async def set_off_days(self, vendor_id: str, off_days: list[OffDayRequest]) -> int:
        if self.fail_writes:
            raise DataUnavailableError("Mock backend is unavailable")
        created = 0
        for body in serialize_bulk_request(off_days):
            if self._has_off_day(vendor_id, body["date"]):
                logger.warning("Off-day already exists for vendor %s on %s", vendor_id, body["date"])
                continue
            self.add_off_day(vendor_id, **body)
            created += 1
        if not created:
            raise DataUnavailableError("No off-days were created")
        logger.info("Created %d of %d off-day(s) for vendor %s", created, len(off_days), vendor_id)
        return created

    async def remove_off_day(self, vendor_id: str, off_day_id: str) -> bool:
        if self.fail_writes:
            raise DataUnavailableError("Mock backend is unavailable")
        existing = self._off_days.get(vendor_id, [])
        remaining = [o for o in existing if o.get("id") != off_day_id]
        if len(remaining) == len(existing):
            logger.warning("Off-day %s not found for vendor %s", off_day_id, vendor_id)
            return False
        self._off_days[vendor_id] = remaining
        logger.info("Off-day %s removed for vendor %s", off_day_id, vendor_id)
        return True

    def reset(self) -> None:
        """Clear all stored data. Used by test fixtures for isolation."""
        self._bookings.clear()
        self._off_days.clear()
        self.booking_queries.clear()
        self.fail_reads = False
        self.fail_writes = False
