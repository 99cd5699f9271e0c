"""
Calendar and time-of-day arithmetic on wire strings.

Dates are naive calendar dates (``YYYY-MM-DD``). Each one is anchored at
12:00 UTC before any day arithmetic, so stepping whole days can never
cross a daylight-saving or local-timezone boundary and skip or repeat a
date. Times of day are ``HH:MM`` strings handled as minutes since midnight.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from salon_booking.exceptions import InvalidDateFormat, InvalidRange

DATE_FORMAT = "%Y-%m-%d"
NOON_UTC_HOUR = 12
MINUTES_PER_DAY = 24 * 60

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2})(?::([0-9]{2}))?")


def parse_date(value: str, hour: int = NOON_UTC_HOUR) -> datetime:
    """Parse ``YYYY-MM-DD`` into an aware UTC datetime at ``hour`` o'clock."""
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise InvalidDateFormat(value)
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        # e.g. 2025-02-30
        raise InvalidDateFormat(value) from None
    return parsed.replace(hour=hour, tzinfo=timezone.utc)


def format_date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


def date_range(start_date: str, count: int) -> list[str]:
    """Return ``count`` consecutive dates starting at ``start_date``, inclusive."""
    if count < 0:
        raise InvalidRange(count)
    anchor = parse_date(start_date)
    return [format_date(anchor + timedelta(days=offset)) for offset in range(count)]


def add_days(date_str: str, days: int) -> str:
    return format_date(parse_date(date_str) + timedelta(days=days))


def day_of_week(date_str: str) -> int:
    """Day of week for a date string, 0 = Sunday ... 6 = Saturday."""
    # isoweekday: Monday=1 ... Sunday=7
    return parse_date(date_str).isoweekday() % 7


def tomorrow(today: Optional[date] = None) -> str:
    """Tomorrow's calendar date; ``today`` defaults to the current UTC date."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    return (today + timedelta(days=1)).strftime(DATE_FORMAT)


def parse_time(value: str) -> int:
    """Parse ``HH:MM`` or ``HH:MM:SS`` into minutes since midnight.

    Seconds are truncated, never rounded.
    """
    match = _TIME_RE.fullmatch(value) if isinstance(value, str) else None
    if not match:
        raise InvalidDateFormat(value, expected="HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise InvalidDateFormat(value, expected="HH:MM")
    return hours * 60 + minutes


def format_time(minutes: int) -> str:
    """Format minutes since midnight as zero-padded 24h ``HH:MM``."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range for a time of day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str) -> str:
    """Normalize a stored time (``09:00:00``) to the wire form (``09:00``)."""
    return format_time(parse_time(value))
