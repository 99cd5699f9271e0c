"""
Availability service.

Composes the scheduling engine for the three read paths of the booking
site and the admin calendar:

- slot list with availability flags for one date
- open-dates scan over a window of upcoming dates
- seven-day admin calendar (effective hours + bookings per day)

Each call fetches its rows from the repository once, at the start, and
resolves every date against that single snapshot. Nothing is cached
between calls.
"""

from collections import defaultdict
from collections.abc import Iterable
from typing import Optional

from salon_booking.config import SchedulingConfig, settings
from salon_booking.exceptions import ServiceNotFound
from salon_booking.logging_context import (
    DEFAULT_REQUEST_ID,
    get_request_id,
    get_request_logger,
    set_request_id,
)
from salon_booking.repository import WEEK_DAYS, AvailabilityRepository
from salon_booking.schemas.availability_schema import (
    CalendarBooking,
    CalendarDay,
    OpenDate,
    Slot,
)
from salon_booking.schemas.booking_schema import BLOCKING_STATUSES, CALENDAR_STATUSES, Booking
from salon_booking.scheduling.calendar_math import date_range, parse_date, tomorrow
from salon_booking.scheduling.conflicts import first_available_slot, mark_availability
from salon_booking.scheduling.resolver import resolve_day, resolve_range
from salon_booking.scheduling.slots import check_minutes, generate_slots

logger = get_request_logger(__name__)


def _bookings_by_date(bookings: Iterable[Booking]) -> dict[str, list[Booking]]:
    grouped: dict[str, list[Booking]] = defaultdict(list)
    for booking in bookings:
        grouped[booking.date].append(booking)
    return grouped


def _ensure_request_id() -> None:
    # The HTTP layer normally sets one per request; fall back to a fresh id.
    if get_request_id() == DEFAULT_REQUEST_ID:
        set_request_id()


class AvailabilityService:
    """
    Read-only availability queries over an AvailabilityRepository.

    Usage:
        service = AvailabilityService(repository)
        slots = await service.get_slots_for_date("2025-03-18", 60)
        dates = await service.get_open_dates(60)
        week = await service.get_calendar_week("2025-03-17")
    """

    def __init__(
        self,
        repository: AvailabilityRepository,
        config: Optional[SchedulingConfig] = None,
    ) -> None:
        self.repository = repository
        self.config = config or settings.scheduling

    @property
    def step_minutes(self) -> int:
        return self.config.slot_step_minutes

    async def get_slots_for_date(self, date: str, service_duration_minutes: int) -> list[Slot]:
        """
        Every candidate slot of ``date`` for a service, flagged available or booked.

        Returns an empty list when the salon is closed that day.

        Raises:
            InvalidDateFormat: malformed date
            InvalidDuration: non-positive duration
        """
        _ensure_request_id()
        parse_date(date)
        check_minutes(service_duration_minutes)

        recurring = await self.repository.list_recurring_rules()
        overrides = await self.repository.list_overrides(date)
        day = resolve_day(date, recurring, overrides)
        if not day.is_open:
            logger.info("%s is closed (%s)", date, day.source.value)
            return []

        bookings = await self.repository.list_bookings(date, date, BLOCKING_STATUSES)
        candidates = generate_slots(day.windows, service_duration_minutes, self.step_minutes)
        slots = mark_availability(candidates, bookings, service_duration_minutes)
        logger.info(
            "%s: %d/%d slots free for %d min service",
            date, sum(1 for s in slots if s.available), len(slots), service_duration_minutes,
        )
        return slots

    async def get_slots_for_service(self, date: str, service_id: int) -> list[Slot]:
        """Slots for a catalogue service, using its configured duration."""
        service = await self.repository.get_service(service_id)
        if not service.is_active:
            raise ServiceNotFound(f"Service {service_id} is not active")
        return await self.get_slots_for_date(date, service.duration_minutes)

    async def get_open_dates(
        self,
        service_duration_minutes: int,
        start_date: Optional[str] = None,
        window_days: Optional[int] = None,
    ) -> list[OpenDate]:
        """
        Which upcoming dates are open, and whether each still has a free slot.

        Args:
            service_duration_minutes: length of the service being booked
            start_date: first date scanned; defaults to tomorrow
            window_days: number of dates scanned; defaults to the configured window

        Returns:
            list[OpenDate]: open dates only, in date order. Closed dates are
            left out rather than returned with ``is_open=False``.
        """
        _ensure_request_id()
        check_minutes(service_duration_minutes)
        start = start_date or tomorrow()
        days = self.config.open_dates_window_days if window_days is None else window_days
        dates = date_range(start, days)
        if not dates:
            return []
        end = dates[-1]

        recurring = await self.repository.list_recurring_rules()
        overrides = await self.repository.list_overrides(start, end)
        bookings = await self.repository.list_bookings(start, end, BLOCKING_STATUSES)
        bookings_by_date = _bookings_by_date(bookings)

        result = []
        for day in resolve_range(start, days, recurring, overrides):
            if not day.is_open:
                continue
            free = first_available_slot(
                day.windows,
                bookings_by_date.get(day.date, []),
                service_duration_minutes,
                self.step_minutes,
            )
            result.append(OpenDate(date=day.date, is_open=True, has_available_slots=free is not None))

        logger.info(
            "Open dates %s..%s: %d open, %d with free slots",
            start, end, len(result), sum(1 for d in result if d.has_available_slots),
        )
        return result

    async def get_calendar_week(self, start_date: str) -> list[CalendarDay]:
        """
        Seven consecutive days from ``start_date`` for the admin calendar.

        Each day carries its effective hours and its pending, confirmed and
        completed bookings (completed ones are shown but never block).
        """
        _ensure_request_id()
        dates = date_range(start_date, WEEK_DAYS)
        end = dates[-1]

        recurring = await self.repository.list_recurring_rules()
        overrides = await self.repository.list_overrides(start_date, end)
        bookings = await self.repository.list_bookings(start_date, end, CALENDAR_STATUSES)
        bookings_by_date = _bookings_by_date(bookings)

        week = []
        for day in resolve_range(start_date, WEEK_DAYS, recurring, overrides):
            day_bookings = [
                CalendarBooking(
                    id=b.id,
                    time=b.time,
                    duration_minutes=b.duration_minutes,
                    status=b.status,
                    customer_name=b.customer_name,
                    service_name=b.service_name,
                )
                for b in sorted(bookings_by_date.get(day.date, []), key=lambda b: b.time)
            ]
            week.append(CalendarDay(**day.model_dump(), bookings=day_bookings))

        logger.info("Calendar week from %s: %d bookings", start_date, len(bookings))
        return week
