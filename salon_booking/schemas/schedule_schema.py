"""Weekly schedule and date-override data models."""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator

from salon_booking.scheduling.calendar_math import normalize_time, parse_date
from salon_booking.schemas.base import WireModel


class ScheduleSource(str, Enum):
    """Where an effective day's hours came from."""

    DEFAULT = "default"
    OVERRIDE = "override"


class TimeWindow(WireModel):
    """An operating-hours window within one day.

    Windows are not required to end after they start; the slot generator
    skips inconsistent ones.
    """

    start_time: str
    end_time: str

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, value: str) -> str:
        return normalize_time(value)


class RecurringRule(WireModel):
    """Weekly-repeating open window for one weekday (0 = Sunday)."""

    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    is_available: bool = True

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, value: str) -> str:
        return normalize_time(value)

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(start_time=self.start_time, end_time=self.end_time)


class OverrideRule(WireModel):
    """Date-specific exception: a closed day or one custom window.

    Several rows may exist for the same date, one per custom window.
    """

    date: str
    is_closed: bool = False
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, value: str) -> str:
        parse_date(value)
        return value

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else normalize_time(value)

    @model_validator(mode="after")
    def closed_rows_have_no_hours(self) -> "OverrideRule":
        if self.is_closed and (self.start_time or self.end_time):
            raise ValueError("a closed override cannot carry start_time/end_time")
        return self

    @property
    def window(self) -> Optional[TimeWindow]:
        if self.start_time and self.end_time:
            return TimeWindow(start_time=self.start_time, end_time=self.end_time)
        return None
