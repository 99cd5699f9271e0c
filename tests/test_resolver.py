"""Tests for override-over-recurring schedule resolution."""

import pytest

from salon_booking.exceptions import InvalidDateFormat
from salon_booking.schemas.schedule_schema import ScheduleSource
from salon_booking.scheduling.resolver import (
    group_overrides_by_date,
    resolve_day,
    resolve_range,
)
from tests.conftest import (
    MONDAY,
    NEXT_SUNDAY,
    SATURDAY,
    SUNDAY,
    TUESDAY,
    WEDNESDAY,
    make_override,
    make_rule,
    make_window,
    weekday_schedule,
)

MONDAY_9_TO_5 = [make_rule(1, "09:00", "17:00")]


class TestRecurringSchedule:
    def test_open_from_weekly_rule(self):
        day = resolve_day(MONDAY, MONDAY_9_TO_5, [])
        assert day.is_open
        assert day.source == ScheduleSource.DEFAULT
        assert day.day_of_week == 1
        assert day.windows == [make_window("09:00", "17:00")]
        assert day.reason is None

    def test_split_shift_keeps_rule_order(self):
        rules = [make_rule(2, "09:00", "12:00"), make_rule(2, "13:30", "18:00")]
        day = resolve_day(TUESDAY, rules, [])
        assert day.windows == [make_window("09:00", "12:00"), make_window("13:30", "18:00")]

    def test_no_rule_for_weekday_is_closed(self):
        day = resolve_day(SUNDAY, MONDAY_9_TO_5, [])
        assert not day.is_open
        assert day.windows == []
        assert day.source == ScheduleSource.DEFAULT

    def test_unavailable_rule_ignored(self):
        rules = [make_rule(1, "09:00", "17:00", is_available=False)]
        assert not resolve_day(MONDAY, rules, []).is_open


class TestOverridePrecedence:
    def test_closed_override_wins_over_recurring(self):
        overrides = [make_override(MONDAY, is_closed=True, reason="Vacances")]
        day = resolve_day(MONDAY, MONDAY_9_TO_5, overrides)
        assert not day.is_open
        assert day.windows == []
        assert day.source == ScheduleSource.OVERRIDE
        assert day.reason == "Vacances"

    def test_open_override_replaces_recurring_window(self):
        rules = [make_rule(1, "09:00", "18:00")]
        overrides = [make_override(MONDAY, "10:00", "12:00")]
        day = resolve_day(MONDAY, rules, overrides)
        assert day.is_open
        assert day.source == ScheduleSource.OVERRIDE
        assert day.windows == [make_window("10:00", "12:00")]

    def test_several_custom_windows(self):
        overrides = [
            make_override(MONDAY, "09:00", "11:00", reason="Formation"),
            make_override(MONDAY, "14:00", "16:00", reason="Formation"),
        ]
        day = resolve_day(MONDAY, MONDAY_9_TO_5, overrides)
        assert day.windows == [make_window("09:00", "11:00"), make_window("14:00", "16:00")]
        assert day.reason == "Formation"

    def test_any_closed_row_closes_whole_day(self):
        overrides = [
            make_override(MONDAY, "09:00", "11:00", reason="Matin"),
            make_override(MONDAY, is_closed=True, reason="Jour férié"),
            make_override(MONDAY, is_closed=True, reason="Autre"),
        ]
        day = resolve_day(MONDAY, MONDAY_9_TO_5, overrides)
        assert not day.is_open
        assert day.windows == []
        assert day.reason == "Jour férié"

    def test_override_opens_normally_closed_day(self):
        day = resolve_day(SUNDAY, MONDAY_9_TO_5, [make_override(SUNDAY, "10:00", "13:00")])
        assert day.is_open
        assert day.day_of_week == 0
        assert day.source == ScheduleSource.OVERRIDE

    def test_overrides_for_other_dates_ignored(self):
        overrides = [make_override(TUESDAY, is_closed=True)]
        day = resolve_day(MONDAY, MONDAY_9_TO_5, overrides)
        assert day.is_open
        assert day.source == ScheduleSource.DEFAULT

    def test_override_rows_without_hours_do_not_fall_back(self):
        day = resolve_day(MONDAY, MONDAY_9_TO_5, [make_override(MONDAY, reason="?")])
        assert not day.is_open
        assert day.windows == []
        assert day.source == ScheduleSource.OVERRIDE


class TestResolveRange:
    def test_week_resolution(self):
        overrides = [make_override(WEDNESDAY, is_closed=True, reason="Inventaire")]
        days = resolve_range(SUNDAY, 7, weekday_schedule(), overrides)

        assert [d.date for d in days] == [
            SUNDAY, MONDAY, TUESDAY, WEDNESDAY, "2025-03-20", "2025-03-21", SATURDAY,
        ]
        assert [d.day_of_week for d in days] == [0, 1, 2, 3, 4, 5, 6]
        assert [d.is_open for d in days] == [False, True, True, False, True, True, True]
        assert days[3].reason == "Inventaire"
        assert days[6].windows == [make_window("10:00", "14:00")]

    def test_matches_day_by_day_resolution(self):
        rules = weekday_schedule()
        overrides = [
            make_override(MONDAY, "13:00", "15:00"),
            make_override(NEXT_SUNDAY, "10:00", "12:00"),
        ]
        days = resolve_range(MONDAY, 7, rules, overrides)
        assert days == [resolve_day(d.date, rules, overrides) for d in days]

    def test_invalid_start(self):
        with pytest.raises(InvalidDateFormat):
            resolve_range("03/17/2025", 7, weekday_schedule(), [])


class TestGrouping:
    def test_group_overrides_preserves_order(self):
        first = make_override(MONDAY, "09:00", "10:00")
        second = make_override(MONDAY, "11:00", "12:00")
        other = make_override(TUESDAY, is_closed=True)
        grouped = group_overrides_by_date([first, other, second])
        assert grouped == {MONDAY: [first, second], TUESDAY: [other]}


def test_invalid_date_rejected():
    with pytest.raises(InvalidDateFormat):
        resolve_day("2025-02-30", MONDAY_9_TO_5, [])
