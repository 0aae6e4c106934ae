"""Vendor-declared off-days."""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

DEFAULT_OFF_DAY_REASON = "Personal time off"


class RecurringPattern(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class OffDayRecord(BaseModel):
    """A day, or a repeating series of days, on which a vendor is unavailable.

    ``date`` anchors a recurring series: the series never applies before it,
    and stops after ``recurring_end_date`` when one is set.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    vendor_id: str
    date: dt.date
    reason: str = DEFAULT_OFF_DAY_REASON
    is_recurring: bool = False
    recurring_pattern: Optional[RecurringPattern] = None
    recurring_end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def _check_end_date(self) -> "OffDayRecord":
        if self.recurring_end_date is not None and self.recurring_end_date < self.date:
            raise ValueError("recurring_end_date must not be before date")
        return self

    @property
    def effective_pattern(self) -> Optional[RecurringPattern]:
        """Pattern used for expansion; recurring without a pattern means weekly."""
        if not self.is_recurring:
            return None
        return self.recurring_pattern or RecurringPattern.WEEKLY


class OffDayRequest(BaseModel):
    """One off-day to create, as sent in a bulk request."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    reason: str = DEFAULT_OFF_DAY_REASON
    is_recurring: bool = False
    recurring_pattern: Optional[RecurringPattern] = None
    recurring_end_date: Optional[dt.date] = None

    @field_validator("reason")
    @classmethod
    def _check_reason(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("An off-day needs a reason")
        return value

    @model_validator(mode="after")
    def _check_end_date(self) -> "OffDayRequest":
        if self.recurring_end_date is not None and self.recurring_end_date < self.date:
            raise ValueError("recurring_end_date must not be before date")
        return self
