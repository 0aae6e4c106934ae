"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_booking_schema(self):
        from vendor_calendar.schemas.booking_schema import BookingRecord, BookingStatus
        assert BookingStatus.IN_PROGRESS == "in_progress"
        assert BookingRecord is not None

    def test_import_off_day_schema(self):
        from vendor_calendar.schemas.off_day_schema import RecurringPattern
        assert RecurringPattern.YEARLY == "yearly"

    def test_schemas_reexports(self):
        from vendor_calendar.schemas import (
            AvailabilityResult, BookingRecord, DayAvailability, DayStatus, OffDayRecord,
        )
        assert DayStatus.OFF_DAY == "off_day"
        assert all(c is not None for c in (AvailabilityResult, BookingRecord, DayAvailability, OffDayRecord))


class TestCalendarImports:
    def test_calendar_reexports(self):
        from vendor_calendar.calendar import (
            GRID_DAYS, aggregate, build_calendar, decide, expand_off_days, generate_grid,
        )
        assert GRID_DAYS == 42
        assert callable(aggregate) and callable(generate_grid)
        assert callable(decide) and callable(build_calendar) and callable(expand_off_days)


class TestDataAccessImports:
    def test_data_access_reexports(self):
        from vendor_calendar.data_access import DataAccess, HttpDataAccess, MockDataAccess
        assert issubclass(HttpDataAccess, DataAccess)
        assert issubclass(MockDataAccess, DataAccess)


class TestPackageImports:
    def test_top_level_reexports(self):
        from vendor_calendar import AvailabilityService, CalendarSession, MutationFailure
        assert issubclass(MutationFailure, Exception)
        assert AvailabilityService is not None and CalendarSession is not None

    def test_config_singleton(self):
        from vendor_calendar.config import settings
        assert settings.calendar.timezone
        assert settings.log_level
