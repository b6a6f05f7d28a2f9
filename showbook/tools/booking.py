"""
In-memory booking store.

Stands in for the bookings table: range queries for the calendar, and the
create/confirm/reject/cancel write path. Writes are serialized with a lock
and availability is re-checked inside it, so two requests racing for the
last slot cannot both succeed.
"""

import datetime
import threading
import uuid
from typing import Any, Mapping, Optional, TypedDict, Union

from showbook.config import BookingRules, settings
from showbook.logging_context import get_request_logger
from showbook.schemas.booking_schema import (
    Booking,
    BookingStatus,
    BookingSubmission,
    PackageType,
    PaymentStatus,
)
from showbook.scheduling.availability import is_time_slot_available
from showbook.scheduling.validation import validate_booking_form
from showbook.tools.packages import get_package_price
from showbook.utils import normalize_phone

logger = get_request_logger(__name__)


class BookingResult(TypedDict, total=False):
    """Result from create_booking and the status transition functions."""

    success: bool
    message: str
    booking: Booking
    errors: list[str]

_bookings: dict[str, Booking] = {}
_lock = threading.Lock()
_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def list_bookings(
    from_date: Optional[datetime.date] = None,
    to_date: Optional[datetime.date] = None,
) -> list[Booking]:
    """Bookings whose date falls in the inclusive range, in date/creation order."""
    with _lock:
        rows = list(_bookings.values())
    return sorted(
        (
            b
            for b in rows
            if (from_date is None or b.date >= from_date)
            and (to_date is None or b.date <= to_date)
        ),
        key=lambda b: (b.date, b.created_at or _EPOCH),
    )


def get_booking(booking_id: str) -> Optional[Booking]:
    """Retrieve a booking by id."""
    return _bookings.get(booking_id)


def create_booking(
    submission: Union[BookingSubmission, Mapping[str, Any]],
    *,
    rules: Optional[BookingRules] = None,
) -> BookingResult:
    """Validate, price and store a new pending booking."""
    if not isinstance(submission, BookingSubmission):
        submission = BookingSubmission(
            **{key: value for key, value in submission.items() if value is not None}
        )

    validation = validate_booking_form(submission)
    if not validation.valid:
        logger.info("Booking rejected by validation: %s", "; ".join(validation.errors))
        return {
            "success": False,
            "message": "Cannot create booking - " + ", ".join(validation.errors) + ".",
            "errors": validation.errors,
        }

    package = PackageType(submission.package_type)
    day = datetime.date.fromisoformat(submission.date.strip())
    price = get_package_price(package)
    email = submission.email.strip()
    address = submission.address.strip()

    with _lock:
        verdict = is_time_slot_available(
            _bookings.values(),
            day,
            submission.time_slot,
            package,
            email,
            address,
            rules=rules or settings.booking_rules,
        )
        if not verdict.available:
            logger.info(
                "Slot conflict on %s at %s: %s", day, submission.time_slot, verdict.reason
            )
            return {
                "success": False,
                "message": f"{submission.time_slot} on {day} is no longer available. {verdict.reason}.",
                "errors": [verdict.reason],
            }

        booking = Booking(
            id=str(uuid.uuid4()),
            booking_number=f"BK-{uuid.uuid4().hex[:6].upper()}",
            customer_name=submission.name.strip(),
            organization_name=submission.organization_name,
            email=email,
            phone=normalize_phone(submission.phone),
            address=address,
            city=submission.city,
            package_type=package,
            date=day,
            time_slot=submission.time_slot.strip(),
            status=BookingStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            price=price,
            message=submission.message,
            created_at=datetime.datetime.now(datetime.timezone.utc),
        )
        _bookings[booking.id] = booking

    logger.info(
        "Booking created: %s for %s on %s at %s",
        booking.booking_number,
        booking.customer_name,
        booking.date,
        booking.time_slot,
    )
    return {
        "success": True,
        "message": (
            f"Booking request received. Reference number: {booking.booking_number}. "
            f"{package.value} on {day} at {booking.time_slot}."
        ),
        "booking": booking,
    }


def _transition(
    booking_id: str,
    allowed_from: tuple[BookingStatus, ...],
    new_status: BookingStatus,
) -> BookingResult:
    with _lock:
        booking = _bookings.get(booking_id)
        if booking is None:
            return {"success": False, "message": f"Booking {booking_id} not found."}
        if booking.status not in allowed_from:
            return {
                "success": False,
                "message": (
                    f"Booking {booking.booking_number} is {booking.status.value} "
                    f"and cannot be marked {new_status.value}."
                ),
            }
        updated = booking.model_copy(update={"status": new_status})
        _bookings[booking_id] = updated

    logger.info(
        "Booking %s: %s -> %s", updated.booking_number, booking.status.value, new_status.value
    )
    return {
        "success": True,
        "message": f"Booking {updated.booking_number} is now {new_status.value}.",
        "booking": updated,
    }


def confirm_booking(booking_id: str) -> BookingResult:
    return _transition(booking_id, (BookingStatus.PENDING,), BookingStatus.CONFIRMED)


def reject_booking(booking_id: str) -> BookingResult:
    return _transition(booking_id, (BookingStatus.PENDING,), BookingStatus.REJECTED)


def complete_booking(booking_id: str) -> BookingResult:
    return _transition(booking_id, (BookingStatus.CONFIRMED,), BookingStatus.COMPLETED)


def cancel_booking(booking_id: str) -> BookingResult:
    """Cancel a booking, freeing its slot for new requests."""
    return _transition(
        booking_id, (BookingStatus.PENDING, BookingStatus.CONFIRMED), BookingStatus.CANCELLED
    )


def mark_paid(booking_id: str) -> BookingResult:
    """Record payment for a booking."""
    with _lock:
        booking = _bookings.get(booking_id)
        if booking is None:
            return {"success": False, "message": f"Booking {booking_id} not found."}
        updated = booking.model_copy(update={"payment_status": PaymentStatus.PAID})
        _bookings[booking_id] = updated
    logger.info("Booking %s marked paid", updated.booking_number)
    return {
        "success": True,
        "message": f"Payment recorded for booking {updated.booking_number}.",
        "booking": updated,
    }


def reset() -> None:
    """Clear all bookings. Used by test fixtures for isolation."""
    with _lock:
        _bookings.clear()
