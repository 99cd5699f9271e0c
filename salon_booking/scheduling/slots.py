"""
Slot generation.

Sweeps each operating window from its own start at a fixed step and emits
every start time whose service interval still fits before the window ends.
"""

import logging
from collections.abc import Iterable, Iterator

from salon_booking.exceptions import InconsistentRule, InvalidDuration
from salon_booking.schemas.schedule_schema import TimeWindow
from salon_booking.scheduling.calendar_math import format_time, parse_time

logger = logging.getLogger(__name__)

DEFAULT_STEP_MINUTES = 30


def check_minutes(minutes: int, name: str = "duration") -> int:
    """Reject anything but a positive whole number of minutes."""
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        raise InvalidDuration(minutes, name)
    return minutes


def window_bounds(window: TimeWindow) -> tuple[int, int]:
    """Return (start, end) in minutes since midnight.

    Raises:
        InconsistentRule: if the window does not end after it starts.
    """
    start, end = parse_time(window.start_time), parse_time(window.end_time)
    if start >= end:
        raise InconsistentRule(window.start_time, window.end_time)
    return start, end


def iter_slot_starts(
    windows: Iterable[TimeWindow], duration_minutes: int, step_minutes: int
) -> Iterator[int]:
    """Yield candidate starts (minutes since midnight) in window order.

    Inconsistent windows are logged and skipped; the remaining windows of
    the day are still swept. Arguments are assumed already validated.
    """
    for window in windows:
        try:
            start, end = window_bounds(window)
        except InconsistentRule as exc:
            logger.warning("Skipping schedule window: %s", exc)
            continue
        cursor = start
        while cursor + duration_minutes <= end:
            yield cursor
            cursor += step_minutes


def generate_slots(
    windows: Iterable[TimeWindow],
    duration_minutes: int,
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> list[str]:
    """
    Generate candidate start times for a service across operating windows.

    Args:
        windows: operating windows, swept independently in the given order
        duration_minutes: service length; a slot needs start + duration <= end
        step_minutes: distance between consecutive candidates in a window

    Returns:
        list[str]: ``HH:MM`` start times, windows concatenated in order.
        A window shorter than the duration contributes nothing.

    Raises:
        InvalidDuration: if duration or step is not a positive integer.
    """
    check_minutes(duration_minutes)
    check_minutes(step_minutes, "step")
    return [format_time(m) for m in iter_slot_starts(windows, duration_minutes, step_minutes)]
