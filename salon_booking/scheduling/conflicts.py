"""
Conflict filter.

Marks slot candidates as booked when their service interval overlaps a
pending or confirmed booking. Intervals are half-open, ``[start, end)``,
so a slot starting exactly when a booking ends is free.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Optional

from salon_booking.schemas.availability_schema import Slot
from salon_booking.schemas.booking_schema import Booking
from salon_booking.schemas.schedule_schema import TimeWindow
from salon_booking.scheduling.calendar_math import format_time, parse_time
from salon_booking.scheduling.slots import (
    DEFAULT_STEP_MINUTES,
    check_minutes,
    iter_slot_starts,
)

logger = logging.getLogger(__name__)

Interval = tuple[int, int]


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """True if [a_start, a_end) overlaps [b_start, b_end)."""
    return a_start < b_end and a_end > b_start


def blocking_bookings(bookings: Iterable[Booking]) -> list[Booking]:
    """Keep only the bookings that occupy their slot (pending, confirmed)."""
    return [b for b in bookings if b.is_blocking]


def booking_intervals(bookings: Iterable[Booking]) -> list[Interval]:
    """Occupied intervals of the blocking bookings, each with its own duration."""
    intervals = []
    for booking in blocking_bookings(bookings):
        start = parse_time(booking.time)
        intervals.append((start, start + booking.duration_minutes))
    return intervals


def _is_free(start: int, duration: int, occupied: Sequence[Interval]) -> bool:
    end = start + duration
    return not any(overlaps(start, end, b_start, b_end) for b_start, b_end in occupied)


def mark_availability(
    candidates: Iterable[str],
    bookings: Iterable[Booking],
    service_duration: int,
) -> list[Slot]:
    """
    Flag each candidate start time as available or booked.

    Args:
        candidates: ``HH:MM`` start times, usually from generate_slots
        bookings: same-day bookings; cancelled and completed ones never block
        service_duration: length of the service being booked, in minutes

    Returns:
        list[Slot]: one entry per candidate, in candidate order.
    """
    check_minutes(service_duration)
    occupied = booking_intervals(bookings)
    return [
        Slot(time=c, available=_is_free(parse_time(c), service_duration, occupied))
        for c in candidates
    ]


def first_available_slot(
    windows: Iterable[TimeWindow],
    bookings: Iterable[Booking],
    service_duration: int,
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> Optional[str]:
    """Return the earliest free start time, stopping at the first one found."""
    check_minutes(service_duration)
    check_minutes(step_minutes, "step")
    occupied = booking_intervals(bookings)
    for start in iter_slot_starts(windows, service_duration, step_minutes):
        if _is_free(start, service_duration, occupied):
            return format_time(start)
    return None


def find_conflicts(
    bookings: Iterable[Booking],
    date: str,
    time: str,
    duration_minutes: int,
    exclude_id: Optional[int] = None,
) -> list[Booking]:
    """Blocking bookings on ``date`` whose interval overlaps the requested one."""
    start = parse_time(time)
    end = start + check_minutes(duration_minutes)
    conflicts = []
    for booking in blocking_bookings(bookings):
        if booking.date != date or (exclude_id is not None and booking.id == exclude_id):
            continue
        b_start = parse_time(booking.time)
        if overlaps(start, end, b_start, b_start + booking.duration_minutes):
            conflicts.append(booking)
    if conflicts:
        logger.debug("%s %s overlaps %d booking(s)", date, time, len(conflicts))
    return conflicts
