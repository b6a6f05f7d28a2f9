"""Booking form validation.

All fields are checked and every failure is reported together, since the
result is shown back to a person filling in a single form.
"""

import datetime
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from showbook.schemas.booking_schema import BookingSubmission, PackageType
from showbook.scheduling.timeslots import is_time_slot_label

# Validation thresholds
MIN_NAME_LENGTH = 2
MIN_ADDRESS_LENGTH = 5

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_PATTERN = re.compile(r"^[\d\s\-\+\(\)]+$")
_VALID_PACKAGES = {p.value for p in PackageType}


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def _is_iso_date(value: str) -> bool:
    try:
        datetime.date.fromisoformat(value.strip())
        return True
    except ValueError:
        return False


def validate_booking_form(
    submission: Union[BookingSubmission, Mapping[str, Any]],
) -> ValidationResult:
    """Check a booking submission and collect every problem found."""
    if not isinstance(submission, BookingSubmission):
        submission = BookingSubmission(
            **{key: value for key, value in submission.items() if value is not None}
        )

    errors: list[str] = []

    if len(submission.name.strip()) < MIN_NAME_LENGTH:
        errors.append(f"Name must be at least {MIN_NAME_LENGTH} characters")

    if not _EMAIL_PATTERN.match(submission.email):
        errors.append("Valid email is required")

    if not _PHONE_PATTERN.match(submission.phone):
        errors.append("Valid phone number is required")

    if len(submission.address.strip()) < MIN_ADDRESS_LENGTH:
        errors.append(f"Address must be at least {MIN_ADDRESS_LENGTH} characters")

    if not submission.date:
        errors.append("Date is required")
    elif not _is_iso_date(submission.date):
        errors.append("Date must be in YYYY-MM-DD format")

    if not submission.time_slot:
        errors.append("Time slot is required")
    elif not is_time_slot_label(submission.time_slot):
        errors.append("Time slot must look like 09:00 AM")

    if submission.package_type not in _VALID_PACKAGES:
        errors.append("Invalid package type")

    return ValidationResult(valid=not errors, errors=errors)
