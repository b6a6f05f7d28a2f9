"""Shared test fixtures and helpers."""

import datetime
from typing import Optional

import pytest

from showbook.config import BookingRules
from showbook.schemas.booking_schema import Booking, BookingStatus, PackageType
from showbook.tools import booking as booking_store

SHOW_DATE = datetime.date(2025, 6, 10)


@pytest.fixture
def rules():
    """The stock policy, pinned so env overrides cannot leak into tests."""
    return BookingRules(
        max_bookings_per_day=3,
        buffer_hours=2,
        operating_start=8,
        operating_end=16,
    )


@pytest.fixture
def store():
    booking_store.reset()
    yield booking_store
    booking_store.reset()


def make_booking(
    time_slot: str = "09:00 AM",
    package_type: PackageType = PackageType.CLASSIC,
    status: BookingStatus = BookingStatus.CONFIRMED,
    date: datetime.date = SHOW_DATE,
    email: Optional[str] = None,
    address: Optional[str] = None,
    **kwargs,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        date=date,
        time_slot=time_slot,
        package_type=package_type,
        status=status,
        email=email,
        address=address,
        **kwargs,
    )


def make_submission(**overrides) -> dict:
    """A valid booking form payload, with any field overridable."""
    payload = {
        "name": "Carol Haddad",
        "email": "carol@school.ae",
        "phone": "+971 50 123 4567",
        "address": "Park Towers, Dubai",
        "date": SHOW_DATE.isoformat(),
        "time_slot": "11:00 AM",
        "package_type": "classic",
        "organization_name": "Park Towers Primary",
    }
    payload.update(overrides)
    return payload
