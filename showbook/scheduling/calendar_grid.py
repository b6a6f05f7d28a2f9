"""
Month-grid support for the booking calendar view.

The grid is always 6 rows x 7 columns starting on Sunday, padded with the
tail of the previous month and the head of the next. It is recomputed from
scratch on every navigation or selection change.
"""

import calendar
import datetime
import logging
from typing import Iterable, Optional

from showbook.schemas.booking_schema import Booking, CalendarDay
from showbook.scheduling.availability import get_bookings_for_date, has_half_day_booking

logger = logging.getLogger(__name__)

GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_CELLS = GRID_ROWS * GRID_COLUMNS


def month_date_range(year: int, month: int) -> tuple[datetime.date, datetime.date]:
    """First and last day of a month, the range to ask storage for."""
    _, days_in_month = calendar.monthrange(year, month)
    return datetime.date(year, month, 1), datetime.date(year, month, days_in_month)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months forward (or back) from ``year``/``month``."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def grid_start(year: int, month: int) -> datetime.date:
    """The Sunday on or before the first of the month."""
    first = datetime.date(year, month, 1)
    # date.weekday(): Monday == 0 ... Sunday == 6
    leading_days = (first.weekday() + 1) % 7
    return first - datetime.timedelta(days=leading_days)


def generate_calendar_days(
    year: int,
    month: int,
    bookings: Iterable[Booking],
    *,
    today: datetime.date,
    selected: Optional[datetime.date] = None,
) -> list[CalendarDay]:
    """
    Build the 42 cells for ``year``/``month``.

    A cell is available when it is not in the past and carries no half-day
    lock. Remaining capacity does not affect the flag; the slot list for the
    day decides that.
    """
    bookings = list(bookings)
    start = grid_start(year, month)
    days = []

    for offset in range(GRID_CELLS):
        day = start + datetime.timedelta(days=offset)
        day_bookings = get_bookings_for_date(bookings, day)
        days.append(
            CalendarDay(
                date=day,
                is_current_month=(day.year == year and day.month == month),
                is_today=(day == today),
                is_selected=(selected is not None and day == selected),
                is_available=(day >= today and not has_half_day_booking(day_bookings, day)),
                booking_count=len(day_bookings),
            )
        )

    logger.debug("Generated calendar grid for %04d-%02d from %s", year, month, start)
    return days


def is_selectable(day: CalendarDay) -> bool:
    """Only available days of the displayed month can be picked."""
    return day.is_available and day.is_current_month
