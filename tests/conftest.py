"""Shared test fixtures and helpers."""

from typing import Optional

import pytest

from salon_booking.config import SchedulingConfig
from salon_booking.repository import InMemoryRepository
from salon_booking.schemas.booking_schema import Booking, BookingStatus, Service
from salon_booking.schemas.schedule_schema import OverrideRule, RecurringRule, TimeWindow
from salon_booking.services.availability import AvailabilityService

# Week of 2025-03-16 (Sunday) .. 2025-03-22 (Saturday)
SUNDAY = "2025-03-16"
MONDAY = "2025-03-17"
TUESDAY = "2025-03-18"
WEDNESDAY = "2025-03-19"
SATURDAY = "2025-03-22"
NEXT_SUNDAY = "2025-03-23"


def make_window(start: str, end: str) -> TimeWindow:
    return TimeWindow(start_time=start, end_time=end)


def make_rule(
    day_of_week: int,
    start: str = "09:00",
    end: str = "17:00",
    is_available: bool = True,
) -> RecurringRule:
    return RecurringRule(
        day_of_week=day_of_week, start_time=start, end_time=end, is_available=is_available
    )


def make_override(
    date: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    is_closed: bool = False,
    reason: Optional[str] = None,
) -> OverrideRule:
    return OverrideRule(
        date=date, is_closed=is_closed, start_time=start, end_time=end, reason=reason
    )


def make_booking(
    date: str,
    time: str,
    duration: int = 30,
    status: BookingStatus = BookingStatus.CONFIRMED,
    booking_id: Optional[int] = None,
    **kwargs,
) -> Booking:
    return Booking(
        id=booking_id,
        date=date,
        time=time,
        duration_minutes=duration,
        status=status,
        **kwargs,
    )


def weekday_schedule() -> list[RecurringRule]:
    """Monday-Friday 09:00-12:00, Saturday 10:00-14:00, closed Sunday."""
    rules = [make_rule(day, "09:00", "12:00") for day in range(1, 6)]
    rules.append(make_rule(6, "10:00", "14:00"))
    return rules


SERVICES = [
    Service(id=1, name="Coupe", duration_minutes=60, price_cents=4500),
    Service(id=2, name="Brushing", duration_minutes=30, price_cents=2500, is_addon=True),
    Service(id=3, name="Permanente", duration_minutes=120, is_active=False),
]


@pytest.fixture
def scheduling_config() -> SchedulingConfig:
    return SchedulingConfig(slot_step_minutes=30, open_dates_window_days=14)


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository(recurring_rules=weekday_schedule(), services=SERVICES)


@pytest.fixture
def availability(repository, scheduling_config) -> AvailabilityService:
    return AvailabilityService(repository, scheduling_config)


def build_availability(
    overrides: tuple[OverrideRule, ...] = (),
    bookings: tuple[Booking, ...] = (),
    rules: Optional[list[RecurringRule]] = None,
) -> AvailabilityService:
    """AvailabilityService over a fresh store seeded with the given rows."""
    repo = InMemoryRepository(
        recurring_rules=weekday_schedule() if rules is None else rules,
        overrides=overrides,
        bookings=bookings,
        services=SERVICES,
    )
    return AvailabilityService(repo, SchedulingConfig(slot_step_minutes=30, open_dates_window_days=14))
