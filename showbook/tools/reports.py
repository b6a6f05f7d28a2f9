"""Admin dashboard helpers: stats, filtering, search and CSV export."""

import csv
import datetime
import io
import logging
from typing import Iterable, Optional

from showbook.schemas.booking_schema import Booking, BookingStatus, PaymentStatus
from showbook.tools.packages import get_display_name

logger = logging.getLogger(__name__)

UPCOMING_WINDOW_DAYS = 30

CSV_HEADERS = [
    "Booking Number",
    "Date",
    "Time",
    "Customer Name",
    "Email",
    "Phone",
    "Organization",
    "Package",
    "Price",
    "Status",
    "Payment Status",
    "Address",
    "Special Requests",
    "Created At",
]


def calculate_booking_stats(bookings: Iterable[Booking]) -> dict[str, int]:
    """Counts per status plus collected and outstanding revenue."""
    bookings = list(bookings)
    stats = {status.value: 0 for status in BookingStatus}
    for booking in bookings:
        stats[booking.status.value] += 1

    stats["total"] = len(bookings)
    stats["total_revenue"] = sum(
        b.price or 0 for b in bookings if b.payment_status == PaymentStatus.PAID
    )
    stats["pending_revenue"] = sum(
        b.price or 0
        for b in bookings
        if b.status == BookingStatus.CONFIRMED and b.payment_status == PaymentStatus.PENDING
    )
    return stats


def filter_bookings_by_date_range(
    bookings: Iterable[Booking], start: datetime.date, end: datetime.date
) -> list[Booking]:
    return [b for b in bookings if start <= b.date <= end]


def get_bookings_for_month(bookings: Iterable[Booking], year: int, month: int) -> list[Booking]:
    return [b for b in bookings if b.date.year == year and b.date.month == month]


def sort_bookings_by_date(bookings: Iterable[Booking], descending: bool = True) -> list[Booking]:
    return sorted(bookings, key=lambda b: b.date, reverse=descending)


def search_bookings(bookings: Iterable[Booking], keyword: str) -> list[Booking]:
    """Match on customer name, email, organization, phone or booking number."""
    needle = keyword.lower()
    results = []
    for booking in bookings:
        haystack = [
            booking.customer_name.lower(),
            (booking.email or "").lower(),
            (booking.organization_name or "").lower(),
        ]
        if any(needle in field for field in haystack):
            results.append(booking)
        elif keyword in (booking.phone or "") or keyword in (booking.booking_number or ""):
            results.append(booking)
    return results


def get_upcoming_bookings(
    bookings: Iterable[Booking], today: datetime.date, days: int = UPCOMING_WINDOW_DAYS
) -> list[Booking]:
    """Bookings from today through the next ``days`` days."""
    return filter_bookings_by_date_range(bookings, today, today + datetime.timedelta(days=days))


def get_overdue_bookings(bookings: Iterable[Booking], today: datetime.date) -> list[Booking]:
    """Past bookings that were never marked completed."""
    return [b for b in bookings if b.date < today and b.status != BookingStatus.COMPLETED]


def is_booking_editable(booking: Booking) -> bool:
    return booking.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED)


def can_confirm_booking(booking: Booking) -> bool:
    return booking.status == BookingStatus.PENDING


def can_reject_booking(booking: Booking) -> bool:
    return booking.status == BookingStatus.PENDING


def can_complete_booking(booking: Booking) -> bool:
    return booking.status == BookingStatus.CONFIRMED


def _created_at(value: Optional[datetime.datetime]) -> str:
    return value.isoformat() if value else ""


def export_bookings_to_csv(bookings: Iterable[Booking]) -> str:
    """Render bookings as CSV text with every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    count = 0
    for booking in bookings:
        writer.writerow(
            [
                booking.booking_number or booking.id or "",
                booking.date.isoformat(),
                booking.time_slot,
                booking.customer_name,
                booking.email or "",
                booking.phone or "",
                booking.organization_name or "",
                get_display_name(booking.package_type),
                booking.price if booking.price is not None else "",
                booking.status.value,
                booking.payment_status.value,
                booking.address or "",
                booking.message or "",
                _created_at(booking.created_at),
            ]
        )
        count += 1
    logger.debug("Exported %d booking(s) to CSV", count)
    return buffer.getvalue()
