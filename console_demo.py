"""
Console rendering of a vendor's availability calendar.

Draws the 6-week grid with one colored cell per date, the month summary,
and any degraded-mode warning. Works against the mock backend without a
running API.

Usage:
    python console_demo.py
    python console_demo.py --month 2025-06 --vendor V1
"""

import argparse
import asyncio
from datetime import date
from typing import Optional

from vendor_calendar.calendar.view import CalendarDay, DateCategory
from vendor_calendar.config import settings
from vendor_calendar.data_access.mock import MockDataAccess
from vendor_calendar.service import AvailabilityService
from vendor_calendar.session import CalendarSession
from vendor_calendar.utils import today_in_zone

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
MAGENTA = "\033[95m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CATEGORY_COLORS: dict[DateCategory, str] = {
    DateCategory.AVAILABLE: GREEN,
    DateCategory.PARTIAL: YELLOW,
    DateCategory.FULLY_BOOKED: RED,
    DateCategory.OFF: MAGENTA,
    DateCategory.PAST: DIM,
    DateCategory.LOADING: BLUE,
}

WEEKDAY_HEADER = "  Su  Mo  Tu  We  Th  Fr  Sa"


def format_cell(day: CalendarDay) -> str:
    color = CATEGORY_COLORS[day.decision.category]
    text = f"{day.day:>4}"
    if not day.is_current_month:
        color = DIM
    if day.is_today:
        text = f"{BOLD}{text}"
    return f"{color}{text}{RESET}"


def render_grid(days: list[CalendarDay]) -> str:
    lines = [WEEKDAY_HEADER]
    for week in range(0, len(days), 7):
        lines.append("".join(format_cell(d) for d in days[week:week + 7]))
    return "\n".join(lines)


class CalendarConsole:
    """Loads one vendor's month and prints it to the terminal."""

    def __init__(self, service: AvailabilityService, vendor_id: str,
                 service_id: Optional[str] = None) -> None:
        self.session = CalendarSession(service, vendor_id, service_id=service_id, debounce_ms=0)

    async def show(self, anchor: date, today: Optional[date] = None) -> str:
        today = today or today_in_zone()
        await self.session.show_month(anchor)
        days = self.session.days(today=today)

        lines = [
            f"{BOLD}{'=' * 30}{RESET}",
            f"{BOLD}  {anchor.strftime('%B %Y')} - vendor {self.session.vendor_id}{RESET}",
            f"{BOLD}{'=' * 30}{RESET}",
            render_grid(days),
            "",
        ]

        result = self.session.result
        if result is not None and result.degraded:
            lines.append(f"{YELLOW}  ! {result.warnings[0]}{RESET}")

        summary = self.session.summary()
        if summary is not None:
            lines.append(
                f"  available: {summary.available_days}  "
                f"partial: {summary.partially_booked_days}  "
                f"full: {summary.fully_booked_days}  "
                f"off: {summary.off_days}"
            )

        blocked = [
            d for d in days
            if d.is_current_month and d.decision.category in (DateCategory.OFF, DateCategory.FULLY_BOOKED)
        ]
        for d in blocked:
            lines.append(f"{DIM}  {d.date.isoformat()}: {d.decision.label}{RESET}")
        return "\n".join(lines)


def build_demo_service(vendor_id: str, anchor: date) -> AvailabilityService:
    """Service over a mock backend seeded with generated bookings."""
    backend = MockDataAccess()
    backend.seed_demo(vendor_id, anchor.replace(day=1))
    backend.add_off_day(vendor_id, date=anchor.replace(day=1).isoformat(),
                        reason="Rest day", isRecurring=True, recurringPattern="weekly")
    return AvailabilityService(backend)


def _parse_month(value: str) -> date:
    return date.fromisoformat(f"{value}-01")


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a vendor availability calendar.")
    parser.add_argument("--vendor", default="V1", help="Vendor ID (default: V1).")
    parser.add_argument("--month", type=_parse_month, default=None,
                        help="Month to show as YYYY-MM (default: current month).")
    args = parser.parse_args()

    anchor = args.month or today_in_zone().replace(day=1)
    console = CalendarConsole(build_demo_service(args.vendor, anchor), args.vendor)
    print(asyncio.run(console.show(anchor)))
    print(f"{DIM}  timezone: {settings.calendar.timezone}{RESET}")


if __name__ == "__main__":
    main()
