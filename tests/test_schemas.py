"""Tests for schedule, booking and availability data models."""

import pytest
from pydantic import ValidationError

from salon_booking.schemas import (
    Booking,
    BookingStatus,
    CalendarDay,
    OverrideRule,
    RecurringRule,
    ScheduleSource,
    Service,
    Slot,
    TimeWindow,
)


class TestTimeWindow:
    def test_seconds_truncated(self):
        window = TimeWindow(start_time="09:00:00", end_time="17:30:59")
        assert (window.start_time, window.end_time) == ("09:00", "17:30")

    def test_inverted_window_allowed(self):
        assert TimeWindow(start_time="18:00", end_time="09:00").end_time == "09:00"

    def test_malformed_time(self):
        with pytest.raises(ValidationError):
            TimeWindow(start_time="9h", end_time="17:00")


class TestRecurringRule:
    def test_window(self):
        rule = RecurringRule(day_of_week=2, start_time="09:00", end_time="12:00")
        assert rule.window == TimeWindow(start_time="09:00", end_time="12:00")
        assert rule.is_available is True

    @pytest.mark.parametrize("day", [-1, 7])
    def test_day_out_of_range(self, day):
        with pytest.raises(ValidationError):
            RecurringRule(day_of_week=day, start_time="09:00", end_time="12:00")

    def test_camel_case_input(self):
        rule = RecurringRule.model_validate(
            {"dayOfWeek": 0, "startTime": "10:00", "endTime": "11:00", "isAvailable": False}
        )
        assert rule.day_of_week == 0
        assert rule.is_available is False

    def test_frozen(self):
        rule = RecurringRule(day_of_week=2, start_time="09:00", end_time="12:00")
        with pytest.raises(ValidationError):
            rule.day_of_week = 3


class TestOverrideRule:
    def test_closed_row(self):
        row = OverrideRule(date="2025-12-25", is_closed=True, reason="Noël")
        assert row.window is None

    def test_open_row_window(self):
        row = OverrideRule(date="2025-12-24", start_time="09:00", end_time="13:00")
        assert row.window == TimeWindow(start_time="09:00", end_time="13:00")

    def test_row_without_hours(self):
        assert OverrideRule(date="2025-12-24").window is None

    def test_closed_row_with_hours_rejected(self):
        with pytest.raises(ValidationError):
            OverrideRule(date="2025-12-25", is_closed=True, start_time="09:00", end_time="12:00")

    @pytest.mark.parametrize("value", ["2025-02-30", "25-12-2025", "2025/12/25"])
    def test_invalid_date(self, value):
        with pytest.raises(ValidationError):
            OverrideRule(date=value, is_closed=True)


class TestBooking:
    def test_defaults(self):
        booking = Booking(date="2025-03-17", time="09:00", duration_minutes=45)
        assert booking.status == BookingStatus.PENDING
        assert booking.id is None
        assert booking.is_blocking

    @pytest.mark.parametrize(
        "status, blocking",
        [
            (BookingStatus.PENDING, True),
            (BookingStatus.CONFIRMED, True),
            (BookingStatus.CANCELLED, False),
            (BookingStatus.COMPLETED, False),
        ],
    )
    def test_is_blocking(self, status, blocking):
        booking = Booking(date="2025-03-17", time="09:00", duration_minutes=30, status=status)
        assert booking.is_blocking is blocking

    def test_status_from_string(self):
        booking = Booking.model_validate(
            {"date": "2025-03-17", "time": "14:30:00", "durationMinutes": 30, "status": "completed"}
        )
        assert booking.status == BookingStatus.COMPLETED
        assert booking.time == "14:30"

    @pytest.mark.parametrize("time", ["\uff10\uff19:\uff13\uff10", "09:30\n"])
    def test_malformed_time_rejected(self, time):
        with pytest.raises(ValidationError):
            Booking(date="2025-03-18", time=time, duration_minutes=30)

    def test_zero_duration_rejected(self):
        with pytest.raises(ValidationError):
            Booking(date="2025-03-17", time="09:00", duration_minutes=0)


class TestService:
    def test_defaults(self):
        service = Service(id=1, name="Coupe", duration_minutes=30)
        assert service.is_active and not service.is_addon

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            Service(id=1, name="Coupe", duration_minutes=-30)


class TestWireNames:
    def test_slot(self):
        assert Slot(time="09:00", available=False).model_dump(by_alias=True) == {
            "time": "09:00",
            "available": False,
        }

    def test_calendar_day(self):
        day = CalendarDay(
            date="2025-03-16",
            day_of_week=0,
            is_open=False,
            source=ScheduleSource.OVERRIDE,
            reason="Fermé",
        )
        assert day.model_dump(mode="json", by_alias=True) == {
            "date": "2025-03-16",
            "dayOfWeek": 0,
            "isOpen": False,
            "windows": [],
            "source": "override",
            "reason": "Fermé",
            "bookings": [],
        }
