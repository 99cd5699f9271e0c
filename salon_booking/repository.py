"""
Persistence collaborator for the availability engine.

``AvailabilityRepository`` is the read interface the availability service
depends on. ``InMemoryRepository`` implements it over in-process
snapshots, together with the admin writes of the salon back office
(weekly schedule, overrides, booking lifecycle) and the customer
self-service reached through a booking token.

In production this would be backed by the salon database; the in-memory
store is what the CLI and the test-suite use.
"""

import asyncio
import itertools
import logging
import secrets
from collections.abc import Collection, Iterable
from typing import Any, Optional, Protocol

from salon_booking.exceptions import (
    BookingNotFound,
    InconsistentRule,
    InvalidBookingAction,
    ServiceNotFound,
    SlotConflictError,
)
from salon_booking.schemas.booking_schema import (
    Booking,
    BookingAction,
    BookingStatus,
    Service,
)
from salon_booking.schemas.schedule_schema import OverrideRule, RecurringRule, TimeWindow
from salon_booking.scheduling.calendar_math import add_days, normalize_time, parse_date, parse_time
from salon_booking.scheduling.conflicts import find_conflicts

logger = logging.getLogger(__name__)

WEEK_DAYS = 7


class AvailabilityRepository(Protocol):
    """Rows the availability service reads, one await per row set."""

    async def list_recurring_rules(self) -> list[RecurringRule]: ...

    async def list_overrides(
        self, start_date: str, end_date: Optional[str] = None
    ) -> list[OverrideRule]: ...

    async def list_bookings(
        self, start_date: str, end_date: str, statuses: Collection[BookingStatus]
    ) -> list[Booking]: ...

    async def get_service(self, service_id: int) -> Service: ...


def _check_window(start_time: str, end_time: str) -> None:
    if parse_time(start_time) >= parse_time(end_time):
        raise InconsistentRule(start_time, end_time)


class InMemoryRepository:
    """
    Snapshot store implementing AvailabilityRepository.

    Every write runs under one asyncio lock, so the overlap check in
    create_booking and the insert that follows it cannot interleave with
    another booking request.
    """

    def __init__(
        self,
        recurring_rules: Iterable[RecurringRule] = (),
        overrides: Iterable[OverrideRule] = (),
        bookings: Iterable[Booking] = (),
        services: Iterable[Service] = (),
    ) -> None:
        self._lock = asyncio.Lock()
        self._recurring: list[RecurringRule] = []
        self._overrides: list[OverrideRule] = []
        self._bookings: dict[int, Booking] = {}
        self._services: dict[int, Service] = {}
        self._ids = itertools.count(1)
        self._load(recurring_rules, overrides, bookings, services)

    def _load(
        self,
        recurring_rules: Iterable[RecurringRule],
        overrides: Iterable[OverrideRule],
        bookings: Iterable[Booking],
        services: Iterable[Service],
    ) -> None:
        self._recurring = list(recurring_rules)
        self._overrides = list(overrides)
        self._services = {s.id: s for s in services}
        bookings = list(bookings)
        self._bookings = {b.id: b for b in bookings if b.id is not None}
        self._ids = itertools.count(max(self._bookings, default=0) + 1)
        for booking in bookings:
            if booking.id is None:
                booking = booking.model_copy(update={"id": self._next_id()})
                self._bookings[booking.id] = booking

    def _next_id(self) -> int:
        return next(self._ids)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InMemoryRepository":
        """Build a store from JSON-style data (camelCase or snake_case keys)."""

        def rows(*keys: str) -> list[Any]:
            for key in keys:
                if key in data:
                    return data[key]
            return []

        return cls(
            recurring_rules=[
                RecurringRule.model_validate(r) for r in rows("recurringRules", "recurring_rules")
            ],
            overrides=[OverrideRule.model_validate(o) for o in rows("overrides")],
            bookings=[Booking.model_validate(b) for b in rows("bookings")],
            services=[Service.model_validate(s) for s in rows("services")],
        )

    def reset(self) -> None:
        """Clear every row. Used by test fixtures for isolation."""
        self._load((), (), (), ())

    # --- Reads -----------------------------------------------------------

    async def list_recurring_rules(self) -> list[RecurringRule]:
        return sorted(self._recurring, key=lambda r: (r.day_of_week, r.start_time))

    async def list_overrides(
        self, start_date: str, end_date: Optional[str] = None
    ) -> list[OverrideRule]:
        end_date = end_date or start_date
        return [o for o in self._overrides if start_date <= o.date <= end_date]

    async def list_bookings(
        self, start_date: str, end_date: str, statuses: Collection[BookingStatus]
    ) -> list[Booking]:
        found = [
            b for b in self._bookings.values()
            if start_date <= b.date <= end_date and b.status in statuses
        ]
        return sorted(found, key=lambda b: (b.date, b.time))

    async def get_service(self, service_id: int) -> Service:
        service = self._services.get(service_id)
        if service is None:
            raise ServiceNotFound(f"Service {service_id} not found")
        return service

    async def get_booking(self, booking_id: int) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found")
        return booking

    # --- Schedule writes -------------------------------------------------

    async def add_service(self, service: Service) -> Service:
        async with self._lock:
            self._services[service.id] = service
        return service

    async def replace_recurring_rules(self, rules: Iterable[RecurringRule]) -> list[RecurringRule]:
        """Atomically replace the whole weekly schedule."""
        rules = list(rules)
        for rule in rules:
            _check_window(rule.start_time, rule.end_time)
        async with self._lock:
            self._recurring = rules
        logger.info("Weekly schedule replaced (%d rules)", len(rules))
        return await self.list_recurring_rules()

    async def save_override(
        self,
        date: str,
        is_closed: bool,
        windows: Iterable[TimeWindow] = (),
        reason: Optional[str] = None,
    ) -> list[OverrideRule]:
        """
        Replace every override row of ``date``.

        A closed day is stored as a single row without hours; an open day
        needs at least one window and gets one row per window.
        """
        parse_date(date)
        windows = list(windows)
        if is_closed:
            rows = [OverrideRule(date=date, is_closed=True, reason=reason or None)]
        else:
            if not windows:
                raise ValueError("An open override needs at least one window")
            for window in windows:
                _check_window(window.start_time, window.end_time)
            rows = [
                OverrideRule(
                    date=date,
                    start_time=w.start_time,
                    end_time=w.end_time,
                    reason=reason or None,
                )
                for w in windows
            ]

        async with self._lock:
            self._overrides = [o for o in self._overrides if o.date != date] + rows
        logger.info("Override saved for %s (closed=%s, %d rows)", date, is_closed, len(rows))
        return rows

    async def reset_day(self, date: str) -> int:
        """Drop every override of ``date``; returns the number of rows deleted."""
        parse_date(date)
        return await self._delete_overrides(date, date)

    async def reset_week(self, start_date: str) -> int:
        """Drop the overrides of seven days starting at ``start_date``."""
        return await self._delete_overrides(start_date, add_days(start_date, WEEK_DAYS - 1))

    async def _delete_overrides(self, start_date: str, end_date: str) -> int:
        async with self._lock:
            kept = [o for o in self._overrides if not start_date <= o.date <= end_date]
            deleted = len(self._overrides) - len(kept)
            self._overrides = kept
        logger.info("Deleted %d override(s) between %s and %s", deleted, start_date, end_date)
        return deleted

    # --- Booking writes --------------------------------------------------

    def _ensure_free(
        self, date: str, time: str, duration: int, exclude_id: Optional[int] = None
    ) -> None:
        conflicts = find_conflicts(self._bookings.values(), date, time, duration, exclude_id)
        if conflicts:
            raise SlotConflictError(
                f"{date} {time} overlaps booking(s) {[c.id for c in conflicts]}"
            )

    def _moved(
        self, current: Booking, date: Optional[str], time: Optional[str]
    ) -> dict[str, Any]:
        """Field update moving ``current`` to a free date/time. Call under the lock."""
        if not date or not time:
            raise InvalidBookingAction("Rescheduling needs both a date and a time")
        if current.status == BookingStatus.CANCELLED:
            raise InvalidBookingAction("A cancelled booking cannot be rescheduled")
        parse_date(date)
        time = normalize_time(time)
        self._ensure_free(date, time, current.duration_minutes, exclude_id=current.id)
        return {"date": date, "time": time}

    def _by_token(self, token: str) -> Booking:
        if token:
            for booking in self._bookings.values():
                if booking.token == token:
                    return booking
        raise BookingNotFound("No booking matches this token")

    async def create_booking(
        self,
        service_id: int,
        date: str,
        time: str,
        customer_name: str,
        customer_email: Optional[str] = None,
    ) -> Booking:
        """
        Insert a pending booking if its interval is still free.

        The overlap check and the insert happen under the store lock, which
        closes the gap between reading availability and writing a booking.

        Raises:
            ServiceNotFound: unknown service id
            InvalidBookingAction: the service is an add-on
            SlotConflictError: a pending/confirmed booking overlaps
        """
        service = await self.get_service(service_id)
        if service.is_addon:
            raise InvalidBookingAction("Cannot book an add-on service directly")
        parse_date(date)
        time = normalize_time(time)

        async with self._lock:
            self._ensure_free(date, time, service.duration_minutes)
            booking = Booking(
                id=self._next_id(),
                date=date,
                time=time,
                duration_minutes=service.duration_minutes,
                status=BookingStatus.PENDING,
                service_id=service.id,
                service_name=service.name,
                customer_name=customer_name,
                customer_email=customer_email,
                token=secrets.token_urlsafe(24),
            )
            self._bookings[booking.id] = booking

        logger.info("Booking %s created for %s on %s at %s", booking.id, customer_name, date, time)
        return booking

    async def apply_booking_action(
        self,
        booking_id: int,
        action: BookingAction,
        date: Optional[str] = None,
        time: Optional[str] = None,
    ) -> Booking:
        """
        Apply an admin action to a booking.

        confirm: pending -> confirmed
        cancel: any status but cancelled -> cancelled
        reschedule: needs date and time, not allowed once cancelled;
            moves the booking and confirms it
        complete: confirmed -> completed
        """
        action = BookingAction(action)
        async with self._lock:
            current = self._bookings.get(booking_id)
            if current is None:
                raise BookingNotFound(f"Booking {booking_id} not found")
            update: dict[str, Any]

            if action == BookingAction.CONFIRM:
                if current.status != BookingStatus.PENDING:
                    raise InvalidBookingAction("Only pending bookings can be confirmed")
                update = {"status": BookingStatus.CONFIRMED}
            elif action == BookingAction.CANCEL:
                if current.status == BookingStatus.CANCELLED:
                    raise InvalidBookingAction("Booking is already cancelled")
                update = {"status": BookingStatus.CANCELLED}
            elif action == BookingAction.RESCHEDULE:
                update = self._moved(current, date, time)
                update["status"] = BookingStatus.CONFIRMED
            else:
                if current.status != BookingStatus.CONFIRMED:
                    raise InvalidBookingAction("Only confirmed bookings can be completed")
                update = {"status": BookingStatus.COMPLETED}

            updated = current.model_copy(update=update)
            self._bookings[booking_id] = updated

        logger.info(
            "Booking %s: %s (%s -> %s)",
            booking_id, action.value, current.status.value, updated.status.value,
        )
        return updated


    # --- Customer self-service -------------------------------------------

    async def get_booking_by_token(self, token: str) -> Booking:
        """Look a booking up by the token sent to the customer."""
        return self._by_token(token)

    async def apply_customer_action(
        self,
        token: str,
        action: BookingAction,
        date: Optional[str] = None,
        time: Optional[str] = None,
    ) -> Booking:
        """
        Cancel or reschedule a booking through its customer token.

        Rescheduling re-checks conflicts and keeps the current status.
        Completed and cancelled bookings can no longer be changed.

        Raises:
            BookingNotFound: no booking carries ``token``
            InvalidBookingAction: action not open to customers, or not
                allowed from the booking's status
            SlotConflictError: the new interval overlaps another booking
        """
        action = BookingAction(action)
        if action not in (BookingAction.CANCEL, BookingAction.RESCHEDULE):
            raise InvalidBookingAction(f"Customers cannot {action.value} a booking")

        async with self._lock:
            current = self._by_token(token)
            if current.status in (BookingStatus.CANCELLED, BookingStatus.COMPLETED):
                raise InvalidBookingAction(f"Booking is already {current.status.value}")
            if action == BookingAction.CANCEL:
                update: dict[str, Any] = {"status": BookingStatus.CANCELLED}
            else:
                update = self._moved(current, date, time)
            updated = current.model_copy(update=update)
            self._bookings[current.id] = updated

        logger.info("Booking %s: customer %s", current.id, action.value)
        return updated
