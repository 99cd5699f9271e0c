from salon_booking.schemas.availability_schema import (
    CalendarBooking,
    CalendarDay,
    EffectiveDay,
    OpenDate,
    Slot,
)
from salon_booking.schemas.booking_schema import (
    BLOCKING_STATUSES,
    CALENDAR_STATUSES,
    Booking,
    BookingAction,
    BookingStatus,
    Service,
)
from salon_booking.schemas.schedule_schema import (
    OverrideRule,
    RecurringRule,
    ScheduleSource,
    TimeWindow,
)

__all__ = [
    "Booking", "BookingAction", "BookingStatus", "Service",
    "BLOCKING_STATUSES", "CALENDAR_STATUSES",
    "OverrideRule", "RecurringRule", "ScheduleSource", "TimeWindow",
    "CalendarBooking", "CalendarDay", "EffectiveDay", "OpenDate", "Slot",
]
