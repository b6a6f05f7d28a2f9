"""
Day-level booking rules and slot-list generation.

Every function here is a pure computation over the bookings passed in.
The caller supplies bookings for a date range (usually one month); each
function re-filters by exact date and ignores cancelled rows itself.

A positive answer is advisory only. The write path must re-check under
its own lock or constraint before persisting a booking.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from showbook.config import BookingRules, settings
from showbook.schemas.booking_schema import Booking, PackageType
from showbook.scheduling.timeslots import format_time_slot, parse_time_slot
from showbook.utils import same_text

logger = logging.getLogger(__name__)

DateLike = Union[datetime.date, str]

REASON_HALF_DAY_LOCK = "Date blocked by half-day booking"
REASON_HALF_DAY_NEEDS_FREE_DAY = "Half-day bookings require the entire day to be free"
REASON_MAX_BOOKINGS = "Maximum bookings per day reached"


@dataclass(frozen=True)
class AvailabilityResult:
    """Verdict for one requested slot."""

    available: bool
    reason: Optional[str] = None


def _as_date(value: DateLike) -> datetime.date:
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(value)


def _as_package(value: Union[PackageType, str]) -> PackageType:
    # Raises ValueError for anything outside the enum.
    return PackageType(value)


def buffer_reason(rules: BookingRules) -> str:
    return f"Requires {rules.buffer_hours}-hour buffer between shows"


def operating_hours_reason(rules: BookingRules) -> str:
    return (
        f"Operating hours: {format_time_slot(rules.operating_start)}"
        f" - {format_time_slot(rules.operating_end)}"
    )


def get_bookings_for_date(bookings: Iterable[Booking], date: DateLike) -> list[Booking]:
    """Bookings on ``date`` that still occupy a slot (everything but cancelled)."""
    day = _as_date(date)
    return [b for b in bookings if b.date == day and b.occupies_slot]


def has_half_day_booking(bookings: Iterable[Booking], date: DateLike) -> bool:
    """True if a non-cancelled half-day booking already holds ``date``."""
    return any(
        b.package_type == PackageType.HALFDAY for b in get_bookings_for_date(bookings, date)
    )


def is_time_slot_available(
    bookings: Iterable[Booking],
    date: DateLike,
    time_slot: str,
    package_type: Union[PackageType, str],
    customer_email: Optional[str] = None,
    customer_address: Optional[str] = None,
    *,
    rules: Optional[BookingRules] = None,
) -> AvailabilityResult:
    """
    Decide whether a new booking may take ``time_slot`` on ``date``.

    Checks run in order and the first failure wins:

    1. an existing half-day booking locks the date
    2. a half-day request needs an otherwise empty day
    3. ordinary requests are capped at ``max_bookings_per_day``
    4. shows need ``buffer_hours`` between them, except against an existing
       booking by the same email at the same address
    5. the slot must start inside the operating window
    """
    rules = rules or settings.booking_rules
    package = _as_package(package_type)
    day_bookings = get_bookings_for_date(bookings, date)

    if has_half_day_booking(day_bookings, date):
        return AvailabilityResult(False, REASON_HALF_DAY_LOCK)

    if package == PackageType.HALFDAY and day_bookings:
        return AvailabilityResult(False, REASON_HALF_DAY_NEEDS_FREE_DAY)

    if package != PackageType.HALFDAY and len(day_bookings) >= rules.max_bookings_per_day:
        return AvailabilityResult(False, REASON_MAX_BOOKINGS)

    requested_hour = parse_time_slot(time_slot)
    for booking in day_bookings:
        gap = abs(requested_hour - parse_time_slot(booking.time_slot))
        if gap >= rules.buffer_hours:
            continue
        # Exemption is per existing booking, never for the whole day.
        same_party = same_text(booking.email, customer_email) and same_text(
            booking.address, customer_address
        )
        if not same_party:
            return AvailabilityResult(False, buffer_reason(rules))

    if requested_hour not in rules.operating_hours:
        return AvailabilityResult(False, operating_hours_reason(rules))

    return AvailabilityResult(True)


def generate_time_slots(
    bookings: Iterable[Booking],
    date: DateLike,
    package_type: Union[PackageType, str],
    customer_email: Optional[str] = None,
    customer_address: Optional[str] = None,
    *,
    rules: Optional[BookingRules] = None,
) -> list[str]:
    """Bookable slot labels for ``date``, ascending by hour."""
    rules = rules or settings.booking_rules
    package = _as_package(package_type)
    bookings = list(bookings)
    day_bookings = get_bookings_for_date(bookings, date)

    if has_half_day_booking(day_bookings, date):
        return []
    if package == PackageType.HALFDAY and day_bookings:
        return []

    slots = []
    for hour in rules.operating_hours:
        label = format_time_slot(hour)
        result = is_time_slot_available(
            day_bookings,
            date,
            label,
            package,
            customer_email,
            customer_address,
            rules=rules,
        )
        if result.available:
            slots.append(label)

    logger.debug("%d slot(s) open on %s for %s", len(slots), date, package.value)
    return slots
