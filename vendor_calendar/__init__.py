"""Vendor availability computation and calendar model."""

from vendor_calendar.service import AvailabilityService, DateCheck, MutationFailure
from vendor_calendar.session import CalendarSession

__all__ = ["AvailabilityService", "CalendarSession", "DateCheck", "MutationFailure"]
