"""
Data-access contract for the availability calendar.

The calendar only ever talks to the backend through these calls.
Implementations return raw JSON-like dicts; turning them into records is
the parser's job so that one malformed record can be dropped on its own.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

from vendor_calendar.schemas.off_day_schema import OffDayRequest


class DataUnavailableError(Exception):
    """Raised when the backend cannot be reached or rejects a request."""


class DataAccess(ABC):
    """Backend operations the calendar depends on."""

    @abstractmethod
    async def fetch_bookings(
        self,
        vendor_id: str,
        start: date,
        end: date,
        service_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Return all bookings for the vendor with event dates in [start, end].

        Raises:
            DataUnavailableError: If the bookings cannot be retrieved.
        """

    @abstractmethod
    async def fetch_off_days(self, vendor_id: str) -> list[dict[str, Any]]:
        """Return all of the vendor's off-days, recurring and one-off.

        Raises:
            DataUnavailableError: If the off-days cannot be retrieved.
        """

    @abstractmethod
    async def set_off_day(
        self,
        vendor_id: str,
        day: date,
        reason: str,
        is_recurring: bool = False,
        recurring_pattern: Optional[str] = None,
    ) -> bool:
        """Create an off-day. Returns True when the backend accepted it.

        Raises:
            DataUnavailableError: If the request fails or is rejected.
        """

    @abstractmethod
    async def set_off_days(self, vendor_id: str, off_days: list[OffDayRequest]) -> int:
        """Create several off-days in one request; returns how many were created.

        Dates that already have an off-day are skipped by the backend.

        Raises:
            DataUnavailableError: If the request fails or nothing was created.
        """

    @abstractmethod
    async def remove_off_day(self, vendor_id: str, off_day_id: str) -> bool:
        """Delete an off-day. Returns True when the backend removed it.

        Raises:
            DataUnavailableError: If the request fails or is rejected.
        """

    async def aclose(self) -> None:
        """Release any held resources."""
