"""
Custom exceptions for the availability engine and the booking store.
Raised in scheduling/ and repository.py, surfaced to callers unchanged.
"""


class BookingEngineError(Exception):
    """Base exception for all availability and booking errors."""


class InvalidDateFormat(BookingEngineError, ValueError):
    """Raised when a date is not YYYY-MM-DD or a time is not HH:MM[:SS]."""

    def __init__(self, value: object, expected: str = "YYYY-MM-DD") -> None:
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid value {value!r}, expected {expected}")


class InvalidDuration(BookingEngineError, ValueError):
    """Raised when a service duration or slot step is not a positive number of minutes."""

    def __init__(self, minutes: object, name: str = "duration") -> None:
        self.minutes = minutes
        super().__init__(f"{name} must be a positive number of minutes, got {minutes!r}")


class InvalidRange(BookingEngineError, ValueError):
    """Raised when a number of days to scan is negative."""

    def __init__(self, days: object) -> None:
        self.days = days
        super().__init__(f"Number of days must be >= 0, got {days!r}")


class InconsistentRule(BookingEngineError):
    """Raised when a schedule window does not end after it starts."""

    def __init__(self, start_time: str, end_time: str) -> None:
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(f"Window {start_time}-{end_time} does not end after it starts")


class ServiceNotFound(BookingEngineError):
    """Raised when a service id has no matching service."""


class BookingNotFound(BookingEngineError):
    """Raised when a booking id has no matching booking."""


class SlotConflictError(BookingEngineError):
    """Raised when a pending or confirmed booking already occupies the requested interval."""


class InvalidBookingAction(BookingEngineError):
    """Raised when an admin action is not allowed from the booking's current status."""
