"""Booking, submission and calendar data models."""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PackageType(str, Enum):
    """Show packages on offer. HALFDAY takes the whole day."""

    PRESCHOOL = "preschool"
    CLASSIC = "classic"
    HALFDAY = "halfday"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class Booking(BaseModel):
    """A stored booking row.

    Only ``date``, ``time_slot``, ``package_type``, ``status``, ``email``
    and ``address`` matter to availability decisions; the rest is carried
    for the store and admin reports.
    """

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    time_slot: str
    package_type: PackageType
    status: BookingStatus = BookingStatus.PENDING
    email: Optional[str] = None
    address: Optional[str] = None

    id: Optional[str] = None
    booking_number: Optional[str] = None
    customer_name: str = ""
    organization_name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    price: Optional[int] = None
    message: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    @property
    def occupies_slot(self) -> bool:
        return self.status != BookingStatus.CANCELLED


class BookingSubmission(BaseModel):
    """Raw booking form input, checked by ``validate_booking_form``.

    Fields are plain strings so that missing or malformed values reach
    validation instead of failing model construction.
    """

    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    date: str = ""
    time_slot: str = ""
    package_type: str = ""
    organization_name: Optional[str] = None
    city: Optional[str] = None
    message: Optional[str] = None


class CalendarDay(BaseModel):
    """One cell of the 6x7 month grid."""

    date: datetime.date
    is_current_month: bool
    is_today: bool
    is_selected: bool
    is_available: bool
    booking_count: int = 0
