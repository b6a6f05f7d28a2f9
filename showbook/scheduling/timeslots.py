"""Conversion between time-slot labels ("09:00 AM") and 24-hour integers.

Slots are always on the hour, so an hour int is the comparable value used
by the buffer and operating-hours checks.
"""

import logging
import re
from typing import Optional

from showbook.config import BookingRules, settings

logger = logging.getLogger(__name__)

_TIME_SLOT_PATTERN = re.compile(r"(\d+):(\d+)\s*(AM|PM)", re.IGNORECASE)


def is_time_slot_label(label: str) -> bool:
    """True if ``label`` looks like ``HH:MM AM|PM``."""
    return bool(label) and _TIME_SLOT_PATTERN.search(label) is not None


def parse_time_slot(label: str) -> int:
    """
    Parse a time-slot label into a 24-hour hour value.

    12 AM maps to 0 and 12 PM stays 12. Unparseable labels return 0 so that
    rows already stored with odd labels keep loading; a warning is logged
    because 0 cannot be told apart from a real midnight slot.
    """
    match = _TIME_SLOT_PATTERN.search(label or "")
    if not match:
        logger.warning("Unparseable time slot %r treated as hour 0", label)
        return 0

    hour = int(match.group(1))
    period = match.group(3).upper()

    if period == "PM" and hour != 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0

    return hour


def format_time_slot(hour: int) -> str:
    """Format a 0-23 hour as the canonical label, e.g. 13 -> "01:00 PM"."""
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be between 0 and 23, got {hour}")
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour - 12 if hour > 12 else 12 if hour == 0 else hour
    return f"{display_hour:02d}:00 {period}"


def operating_time_slots(rules: Optional[BookingRules] = None) -> list[str]:
    """Every label in the operating window, ascending."""
    rules = rules or settings.booking_rules
    return [format_time_slot(hour) for hour in rules.operating_hours]
