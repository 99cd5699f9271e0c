"""
Schedule resolver.

Turns the recurring weekly schedule and the date-specific overrides into
the effective open/closed state and operating windows of concrete dates.

Precedence is strict: if a date has any override row, the overrides alone
decide that date and the recurring schedule is ignored; windows from the
two sources are never merged.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from salon_booking.schemas.availability_schema import EffectiveDay
from salon_booking.schemas.schedule_schema import (
    OverrideRule,
    RecurringRule,
    ScheduleSource,
    TimeWindow,
)
from salon_booking.scheduling.calendar_math import date_range, day_of_week

logger = logging.getLogger(__name__)


def group_overrides_by_date(overrides: Iterable[OverrideRule]) -> dict[str, list[OverrideRule]]:
    """Bucket override rows by date, preserving their original order."""
    grouped: dict[str, list[OverrideRule]] = defaultdict(list)
    for override in overrides:
        grouped[override.date].append(override)
    return dict(grouped)


def group_recurring_by_weekday(rules: Iterable[RecurringRule]) -> dict[int, list[TimeWindow]]:
    """Bucket the available recurring windows by day of week."""
    grouped: dict[int, list[TimeWindow]] = defaultdict(list)
    for rule in rules:
        if rule.is_available:
            grouped[rule.day_of_week].append(rule.window)
    return dict(grouped)


def _resolve_from_overrides(
    date: str, weekday: int, overrides: Sequence[OverrideRule]
) -> EffectiveDay:
    closed = next((o for o in overrides if o.is_closed), None)
    if closed is not None:
        # Any closed row closes the whole day, whatever the other rows say.
        return EffectiveDay(
            date=date,
            day_of_week=weekday,
            is_open=False,
            windows=[],
            source=ScheduleSource.OVERRIDE,
            reason=closed.reason,
        )

    windows = [o.window for o in overrides if o.window is not None]
    return EffectiveDay(
        date=date,
        day_of_week=weekday,
        is_open=bool(windows),
        windows=windows,
        source=ScheduleSource.OVERRIDE,
        reason=overrides[0].reason,
    )


def _resolve(
    date: str,
    recurring_by_weekday: dict[int, list[TimeWindow]],
    overrides_by_date: dict[str, list[OverrideRule]],
) -> EffectiveDay:
    weekday = day_of_week(date)
    overrides = overrides_by_date.get(date)
    if overrides:
        return _resolve_from_overrides(date, weekday, overrides)

    windows = recurring_by_weekday.get(weekday, [])
    return EffectiveDay(
        date=date,
        day_of_week=weekday,
        is_open=bool(windows),
        windows=list(windows),
        source=ScheduleSource.DEFAULT,
    )


def resolve_day(
    date: str,
    recurring_rules: Iterable[RecurringRule],
    override_rules: Iterable[OverrideRule],
) -> EffectiveDay:
    """
    Resolve one date against the weekly schedule and its overrides.

    Args:
        date: the date as YYYY-MM-DD
        recurring_rules: every recurring rule (any weekday, any availability)
        override_rules: override rows; rows for other dates are ignored

    Returns:
        EffectiveDay with ``source=override`` whenever at least one override
        row matches the date, ``source=default`` otherwise.

    Raises:
        InvalidDateFormat: if ``date`` is not a YYYY-MM-DD calendar date.
    """
    return _resolve(
        date,
        group_recurring_by_weekday(recurring_rules),
        group_overrides_by_date(o for o in override_rules if o.date == date),
    )


def resolve_range(
    start_date: str,
    days: int,
    recurring_rules: Iterable[RecurringRule],
    override_rules: Iterable[OverrideRule],
) -> list[EffectiveDay]:
    """
    Resolve ``days`` consecutive dates from ``start_date`` in one pass.

    The rules are grouped once and reused for every date, so callers fetch
    them with a single query for the whole range.
    """
    dates = date_range(start_date, days)
    recurring_by_weekday = group_recurring_by_weekday(recurring_rules)
    overrides_by_date = group_overrides_by_date(override_rules)

    resolved = [_resolve(d, recurring_by_weekday, overrides_by_date) for d in dates]
    logger.debug(
        "Resolved %d days from %s (%d open)",
        len(resolved), start_date, sum(1 for day in resolved if day.is_open),
    )
    return resolved
