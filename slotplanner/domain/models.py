"""
Domain models for time periods, schedules, bookings and slots.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Tuple

import pendulum
from pendulum import Date, DateTime, Duration

from . import interval_overlap
from .time_parsing import parse_time_string

logger = logging.getLogger(__name__)

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


@dataclass(frozen=True)
class TimePeriod:
    """
    Immutable half-open interval ``[start, end)``.

    Consumers expect ``start < end``. A degenerate or inverted period is
    never rejected here; it simply never overlaps anything.
    """
    start: Any
    end: Any

    def duration(self) -> Any:
        """Return ``end - start`` in the units of the instants."""
        return self.end - self.start

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes."""
        delta = self.duration()
        if isinstance(delta, timedelta):
            return int(delta.total_seconds() // 60)
        return int(delta)

    def is_empty(self) -> bool:
        return not self.start < self.end

    def overlaps(self, other: "TimePeriod") -> bool:
        """Check if this period overlaps with another."""
        return interval_overlap.overlaps(self.start, self.end, other.start, other.end)

    def contains(self, instant: Any) -> bool:
        """Check if an instant falls inside the period (end excluded)."""
        return self.start <= instant < self.end

    def contains_period(self, other: "TimePeriod") -> bool:
        """Check if another period lies entirely within this one."""
        return interval_overlap.contains(self.start, self.end, other.start, other.end)

    def to_dict(self, timezone: str | None = None) -> Dict[str, Any]:
        """
        Serialize to ISO-8601 strings.

        When a timezone is given, both instants are converted to it and the
        timezone name is included. Integer (minute offset) instants are
        returned unchanged and ignore the timezone.
        """
        if not isinstance(self.start, datetime):
            return {"start_time": self.start, "end_time": self.end}
        if timezone:
            return {
                "start_time": self.start.in_timezone(timezone).isoformat(),
                "end_time": self.end.in_timezone(timezone).isoformat(),
                "timezone": timezone,
            }
        return {
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
        }

    def __str__(self) -> str:
        if isinstance(self.start, DateTime) and isinstance(self.end, DateTime):
            return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"
        return f"{self.start} - {self.end}"


class SlotStatus(str, Enum):
    """Availability status of a generated slot."""
    AVAILABLE = "available"
    BUSY = "busy"

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return value in {status.value for status in cls}


@dataclass(frozen=True)
class AvailableSlot:
    """A fixed-size candidate appointment window tagged available or busy."""
    start: DateTime
    end: DateTime
    status: SlotStatus
    location_id: str | None = None

    @property
    def is_available(self) -> bool:
        return self.status == SlotStatus.AVAILABLE

    @property
    def period(self) -> TimePeriod:
        return TimePeriod(start=self.start, end=self.end)

    def to_dict(self) -> Dict[str, str | None]:
        return {
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
            "status": self.status.value,
            "location_id": self.location_id,
        }


@dataclass(frozen=True)
class SlotConfiguration:
    """Slot duration, buffer and anchored work periods for one day."""
    duration: Duration
    buffer: Duration
    periods: Tuple[TimePeriod, ...] = ()

    def total_slot_duration(self) -> Duration:
        """Return slot duration plus trailing buffer."""
        return self.duration + self.buffer


@dataclass(frozen=True)
class WorkPeriod:
    """One contiguous opening interval of a day, as "HH:MM" strings."""
    start: str
    end: str

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "WorkPeriod":
        return cls(start=data.get("start"), end=data.get("end"))

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start, "end": self.end}

    def anchor(self, date: Date, timezone: str = "UTC") -> TimePeriod | None:
        """
        Materialize the period on a calendar date.

        Returns None for malformed or inverted times; such a period
        contributes nothing to free time.
        """
        start = parse_time_string(self.start)
        end = parse_time_string(self.end)

        if start is None or end is None:
            logger.warning("Ignoring malformed work period %s-%s", self.start, self.end)
            return None

        period = TimePeriod(
            start=pendulum.datetime(date.year, date.month, date.day, start[0], start[1], tz=timezone),
            end=pendulum.datetime(date.year, date.month, date.day, end[0], end[1], tz=timezone),
        )

        if period.is_empty():
            logger.warning("Ignoring inverted work period %s-%s", self.start, self.end)
            return None

        return period


@dataclass(frozen=True)
class WorkSchedule:
    """
    Recurring availability for one weekday (0=Monday, 6=Sunday) of a
    provider at a location.
    """
    day_of_week: int
    work_periods: Tuple[WorkPeriod, ...]
    slot_duration_minutes: int
    slot_buffer_minutes: int = 0
    is_active: bool = True
    provider_id: str | None = None
    location_id: str | None = None

    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def applies_to(self, date: Date) -> bool:
        """Check if this schedule governs the given calendar date."""
        return self.is_active and self.day_of_week == date.weekday()

    def periods_for_date(self, date: Date, timezone: str = "UTC") -> List[TimePeriod]:
        """Anchor all well-formed work periods to the given date."""
        periods: List[TimePeriod] = []
        for work_period in self.work_periods:
            period = work_period.anchor(date, timezone)
            if period is not None:
                periods.append(period)
        return periods

    def slot_configuration_for_date(self, date: Date, timezone: str = "UTC") -> SlotConfiguration:
        return SlotConfiguration(
            duration=pendulum.duration(minutes=self.slot_duration_minutes),
            buffer=pendulum.duration(minutes=self.slot_buffer_minutes),
            periods=tuple(self.periods_for_date(date, timezone)),
        )

    def booking_duration(self, default: timedelta | int | None = None) -> Duration:
        """
        Time a booking without a stored duration occupies on this day.

        Args:
            default: Configured fallback (minutes or timedelta). When None,
                the schedule's slot duration plus buffer applies.
        """
        if isinstance(default, timedelta):
            return default
        if default is not None:
            return pendulum.duration(minutes=int(default))
        return pendulum.duration(minutes=self.slot_duration_minutes + self.slot_buffer_minutes)


@dataclass(frozen=True)
class Booking:
    """
    An already-booked appointment consumed by the engine.

    ``duration_minutes`` may be absent, in which case callers supply the
    default that applies to them.
    """
    start: DateTime
    duration_minutes: int | None = None
    cancelled: bool = False
    booking_id: str | None = None
    provider_id: str | None = None
    location_id: str | None = None
    title: str = field(default="", compare=False)

    def effective_duration(self, default: Duration) -> Duration:
        if self.duration_minutes is None:
            return default
        return pendulum.duration(minutes=self.duration_minutes)

    def end_time(self, default: Duration) -> DateTime:
        return self.start + self.effective_duration(default)

    def time_range(self, default: Duration) -> TimePeriod:
        """Return the booked interval ``[start, start + duration)``."""
        return TimePeriod(start=self.start, end=self.end_time(default))
