from vendor_calendar.calendar.aggregator import (
    InvalidDateRangeError,
    aggregate,
    degraded_result,
)
from vendor_calendar.calendar.grid import GRID_DAYS, GridCell, generate_grid, grid_range
from vendor_calendar.calendar.recurrence import expand_off_days
from vendor_calendar.calendar.view import (
    CalendarDay,
    DateCategory,
    DateDecision,
    MonthSummary,
    build_calendar,
    decide,
    is_date_pickable,
    summarize_month,
)

__all__ = [
    "aggregate", "degraded_result", "InvalidDateRangeError",
    "generate_grid", "grid_range", "GridCell", "GRID_DAYS",
    "expand_off_days",
    "decide", "is_date_pickable", "build_calendar", "summarize_month",
    "CalendarDay", "DateCategory", "DateDecision", "MonthSummary",
]
