from showbook.scheduling.availability import (
    AvailabilityResult,
    generate_time_slots,
    get_bookings_for_date,
    has_half_day_booking,
    is_time_slot_available,
)
from showbook.scheduling.calendar_grid import generate_calendar_days
from showbook.scheduling.timeslots import format_time_slot, parse_time_slot
from showbook.scheduling.validation import ValidationResult, validate_booking_form

__all__ = [
    "AvailabilityResult",
    "ValidationResult",
    "format_time_slot",
    "parse_time_slot",
    "get_bookings_for_date",
    "has_half_day_booking",
    "is_time_slot_available",
    "generate_time_slots",
    "generate_calendar_days",
    "validate_booking_form",
]
