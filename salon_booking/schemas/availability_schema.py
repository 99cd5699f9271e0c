"""Derived, response-only availability models.

Serialise with ``model_dump(by_alias=True)`` to get the camelCase wire
names (``isOpen``, ``hasAvailableSlots``...).
"""

from typing import Optional

from pydantic import Field

from salon_booking.schemas.base import WireModel
from salon_booking.schemas.booking_schema import BookingStatus
from salon_booking.schemas.schedule_schema import ScheduleSource, TimeWindow


class Slot(WireModel):
    """Candidate start time with its availability flag."""

    time: str
    available: bool


class EffectiveDay(WireModel):
    """Open/closed state and windows for one date after override precedence."""

    date: str
    day_of_week: int
    is_open: bool
    windows: list[TimeWindow] = Field(default_factory=list)
    source: ScheduleSource
    reason: Optional[str] = None


class OpenDate(WireModel):
    date: str
    is_open: bool = True
    has_available_slots: bool


class CalendarBooking(WireModel):
    id: Optional[int] = None
    time: str
    duration_minutes: int
    status: BookingStatus
    customer_name: Optional[str] = None
    service_name: Optional[str] = None


class CalendarDay(EffectiveDay):
    """Effective day plus the bookings shown on the admin calendar."""

    bookings: list[CalendarBooking] = Field(default_factory=list)
