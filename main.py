"""
Command-line entry point for inspecting booking availability.

Reads a JSON export of booking rows (a list, or ``{"bookings": [...]}`` as
returned by the bookings API) and prints either the open slots for a day or
the month grid.

Usage:
    python main.py --bookings bookings.json slots --date 2025-06-10 --package classic
    python main.py --bookings bookings.json calendar --month 2025-06
"""

import argparse
import datetime
import json
import sys
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import TypeAdapter, ValidationError

from showbook.config import settings
from showbook.logging_context import get_request_logger, set_request_id
from showbook.schemas.booking_schema import Booking, PackageType
from showbook.scheduling.availability import generate_time_slots, get_bookings_for_date
from showbook.scheduling.calendar_grid import generate_calendar_days, month_date_range

logger = get_request_logger(__name__)

_BOOKING_LIST = TypeAdapter(list[Booking])


def load_bookings(path: Path) -> list[Booking]:
    """Load and validate booking rows from a JSON file."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("bookings", [])
    return _BOOKING_LIST.validate_python(payload)


def _iso_date(value: str) -> datetime.date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def _year_month(value: str) -> tuple[int, int]:
    """argparse type for YYYY-MM months."""
    try:
        year, month = (int(part) for part in value.split("-"))
        datetime.date(year, month, 1)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid month {value!r}, expected YYYY-MM") from None
    return year, month


def _today() -> datetime.date:
    return datetime.datetime.now(ZoneInfo(settings.business.timezone)).date()


def _print_slots(bookings: list[Booking], args: argparse.Namespace) -> None:
    day = args.date
    slots = generate_time_slots(bookings, day, args.package, args.email, args.address)
    taken = len(get_bookings_for_date(bookings, day))
    sys.stdout.write(f"{day.isoformat()} ({taken} existing booking(s))\n")
    if not slots:
        sys.stdout.write("  No slots available.\n")
    for label in slots:
        sys.stdout.write(f"  {label}\n")


def _print_calendar(bookings: list[Booking], args: argparse.Namespace) -> None:
    year, month = args.month
    today = args.today or _today()
    first, last = month_date_range(year, month)
    days = generate_calendar_days(year, month, bookings, today=today)

    sys.stdout.write(f"{first:%B %Y} ({first} to {last})\n")
    sys.stdout.write(" Su  Mo  Tu  We  Th  Fr  Sa\n")
    for row_start in range(0, len(days), 7):
        cells = []
        for day in days[row_start:row_start + 7]:
            if not day.is_current_month:
                cells.append("  .")
                continue
            if day.date < today:
                marker = "x"
            elif not day.is_available:
                marker = "H"
            else:
                marker = str(day.booking_count) if day.booking_count else "*"
            cells.append(f"{day.date.day:2d}{marker}")
        sys.stdout.write(" ".join(cells) + "\n")
    sys.stdout.write("* open, n = existing bookings, H = half-day lock, x = past\n")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description=f"Booking availability for {settings.business.name}."
    )
    parser.add_argument(
        "--bookings",
        type=str,
        required=True,
        help="Path to a JSON file of booking rows.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    slots_parser = subparsers.add_parser("slots", help="List open time slots for a date.")
    slots_parser.add_argument(
        "--date", required=True, type=_iso_date, help="Date as YYYY-MM-DD."
    )
    slots_parser.add_argument(
        "--package",
        required=True,
        choices=[p.value for p in PackageType],
        help="Package being booked.",
    )
    slots_parser.add_argument("--email", default=None, help="Customer email.")
    slots_parser.add_argument("--address", default=None, help="Venue address.")

    calendar_parser = subparsers.add_parser("calendar", help="Show the month grid.")
    calendar_parser.add_argument(
        "--month", required=True, type=_year_month, help="Month as YYYY-MM."
    )
    calendar_parser.add_argument(
        "--today", default=None, type=_iso_date, help="Override today's date (YYYY-MM-DD)."
    )

    args = parser.parse_args(argv)
    set_request_id()

    bookings_path = Path(args.bookings)
    if not bookings_path.exists():
        logger.error("Bookings file not found: %s", bookings_path)
        sys.exit(1)

    try:
        bookings = load_bookings(bookings_path)
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.error("Could not load bookings from %s: %s", bookings_path, exc)
        sys.exit(1)

    logger.info("Loaded %d booking(s) from %s", len(bookings), bookings_path)

    if args.command == "slots":
        _print_slots(bookings, args)
    else:
        _print_calendar(bookings, args)


if __name__ == "__main__":
    main()
