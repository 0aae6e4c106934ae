"""
Command-line entry point for the vendor availability calendar.

Renders a month or checks a single date against either the REST backend
or the in-memory mock backend.

Usage:
    Month view:   python main.py month --vendor V1 --month 2025-06
    Date check:   python main.py check --vendor V1 --date 2025-06-15
    Offline demo: python main.py --mock month
"""

import argparse
import asyncio
import logging
import sys
from datetime import date

from vendor_calendar.config import settings
from vendor_calendar.data_access.base import DataAccess
from vendor_calendar.data_access.http_client import HttpDataAccess
from vendor_calendar.service import AvailabilityService
from vendor_calendar.utils import today_in_zone

logger = logging.getLogger(__name__)


def _build_backend(use_mock: bool, vendor_id: str, anchor: date) -> DataAccess:
    if use_mock:
        from console_demo import build_demo_service

        return build_demo_service(vendor_id, anchor).data_access
    return HttpDataAccess()


async def _run_month(args: argparse.Namespace) -> int:
    from console_demo import CalendarConsole

    anchor = args.month or today_in_zone().replace(day=1)
    backend = _build_backend(args.mock, args.vendor, anchor)
    try:
        console = CalendarConsole(AvailabilityService(backend), args.vendor, args.service)
        sys.stdout.write(await console.show(anchor) + "\n")
    finally:
        await backend.aclose()
    return 0


async def _run_check(args: argparse.Namespace) -> int:
    backend = _build_backend(args.mock, args.vendor, args.date)
    try:
        check = await AvailabilityService(backend).check_date(
            args.vendor, args.date, service_id=args.service
        )
    finally:
        await backend.aclose()

    sys.stdout.write(f"{check.date.isoformat()}: {check.decision.label}\n")
    if check.degraded:
        sys.stdout.write("warning: availability could not be verified\n")
    if check.alternatives:
        sys.stdout.write(
            "alternatives: " + ", ".join(d.isoformat() for d in check.alternatives) + "\n"
        )
    return 0 if check.pickable else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Vendor availability calendar.")
    parser.add_argument("--mock", action="store_true", default=settings.backend.use_mock_data,
                        help="Use generated mock data instead of the REST backend.")
    sub = parser.add_subparsers(dest="command", required=True)

    month = sub.add_parser("month", help="Render a month calendar.")
    month.add_argument("--vendor", default="V1")
    month.add_argument("--service", default=None)
    month.add_argument("--month", type=lambda v: date.fromisoformat(f"{v}-01"), default=None)

    check = sub.add_parser("check", help="Check whether a date can be booked.")
    check.add_argument("--vendor", default="V1")
    check.add_argument("--service", default=None)
    check.add_argument("--date", type=date.fromisoformat, required=True)

    args = parser.parse_args()
    runner = _run_month if args.command == "month" else _run_check
    sys.exit(asyncio.run(runner(args)))


if __name__ == "__main__":
    main()
