"""Booking and service data models."""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from salon_booking.scheduling.calendar_math import normalize_time, parse_date
from salon_booking.schemas.base import WireModel


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# A pending request holds its slot until an admin rejects it.
BLOCKING_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED}
)
CALENDAR_STATUSES: frozenset[BookingStatus] = BLOCKING_STATUSES | {BookingStatus.COMPLETED}


class BookingAction(str, Enum):
    """Admin actions on an existing booking."""

    CONFIRM = "confirm"
    CANCEL = "cancel"
    RESCHEDULE = "reschedule"
    COMPLETE = "complete"


class Service(WireModel):
    """Bookable salon service."""

    id: int
    name: str
    duration_minutes: int = Field(gt=0)
    price_cents: int = 0
    is_active: bool = True
    is_addon: bool = False


class Booking(WireModel):
    """Snapshot of one booking row, carrying its own service duration."""

    id: Optional[int] = None
    date: str
    time: str
    duration_minutes: int = Field(gt=0)
    status: BookingStatus = BookingStatus.PENDING
    service_id: Optional[int] = None
    service_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    token: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, value: str) -> str:
        parse_date(value)
        return value

    @field_validator("time", mode="before")
    @classmethod
    def normalize_time_of_day(cls, value: str) -> str:
        return normalize_time(value)

    @property
    def is_blocking(self) -> bool:
        return self.status in BLOCKING_STATUSES
