"""
File-backed schedule and booking store.

Loads schedules and bookings from a YAML (or JSON) document so the engine
can run without a database. Every schedule is validated on load.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import pendulum
import yaml
from pendulum import DateTime
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..config import DefaultsConfig
from ..domain.exceptions import DataFileError, InvalidScheduleError
from ..domain.models import Booking, WorkPeriod, WorkSchedule
from ..domain.validation import validate_schedule

logger = logging.getLogger(__name__)

CANCELLED_STATUS = "cancelled"


class ScheduleRecord(BaseModel):
    """Raw schedule entry as stored in the data file."""
    provider_id: str
    location_id: str
    day_of_week: int
    work_periods: List[Dict[str, Any]] = Field(default_factory=list)
    slot_duration_minutes: int | None = None
    slot_buffer_minutes: int | None = None
    is_active: bool = True

    @field_validator("work_periods")
    @classmethod
    def restore_unquoted_times(cls, value: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        YAML 1.1 reads unquoted 13:00 as the base-60 integer 780; turn such
        values back into "HH:MM" strings.
        """
        restored = []
        for period in value:
            restored.append({
                key: f"{item // 60:02d}:{item % 60:02d}" if isinstance(item, int) and not isinstance(item, bool) else item
                for key, item in period.items()
            })
        return restored

    def to_domain(self, defaults: DefaultsConfig) -> WorkSchedule:
        work_periods = self.work_periods or defaults.default_work_periods()
        return WorkSchedule(
            provider_id=self.provider_id,
            location_id=self.location_id,
            day_of_week=self.day_of_week,
            work_periods=tuple(WorkPeriod.from_dict(p) for p in work_periods),
            slot_duration_minutes=(
                self.slot_duration_minutes
                if self.slot_duration_minutes is not None
                else defaults.slot_duration_minutes
            ),
            slot_buffer_minutes=(
                self.slot_buffer_minutes
                if self.slot_buffer_minutes is not None
                else defaults.slot_buffer_minutes
            ),
            is_active=self.is_active,
        )


class BookingRecord(BaseModel):
    """Raw booking entry as stored in the data file."""
    id: str | None = None
    provider_id: str
    location_id: str
    start: str | datetime
    duration_minutes: int | None = None
    status: str = "confirmed"
    title: str = ""

    @field_validator("status")
    @classmethod
    def normalize_status(cls, value: str) -> str:
        return value.strip().lower()

    def to_domain(self, timezone: str) -> Booking:
        if isinstance(self.start, datetime):
            start = pendulum.instance(self.start, tz=timezone)
        else:
            start = pendulum.parse(self.start, tz=timezone)

        return Booking(
            start=start,
            duration_minutes=self.duration_minutes,
            cancelled=self.status == CANCELLED_STATUS,
            booking_id=self.id,
            provider_id=self.provider_id,
            location_id=self.location_id,
            title=self.title,
        )


class FileScheduleStore:
    """
    Schedule and booking lookups backed by a single data file.

    Implements both ``ScheduleRepository`` and ``BookingRepository``. Booking
    lookups return cancelled entries too; the engine filters them.
    """

    def __init__(
        self,
        schedules: List[WorkSchedule] | None = None,
        bookings: List[Booking] | None = None,
    ):
        self._schedules: List[WorkSchedule] = []
        self._bookings: List[Booking] = list(bookings or [])
        for schedule in schedules or []:
            self.add_schedule(schedule)

    @classmethod
    def from_file(
        cls,
        data_file: Path,
        timezone: str = "UTC",
        defaults: DefaultsConfig | None = None,
    ) -> "FileScheduleStore":
        """
        Load schedules and bookings from a YAML/JSON file.

        Raises:
            DataFileError: If the file is missing, unreadable or malformed
            InvalidScheduleError: If a schedule fails validation
        """
        defaults = defaults or DefaultsConfig()

        if not data_file.exists():
            raise DataFileError(f"Data file not found: {data_file}")

        try:
            with open(data_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise DataFileError(f"Invalid data file {data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataFileError("Data file must contain a mapping at the root level.")

        try:
            schedules = [
                ScheduleRecord(**entry).to_domain(defaults)
                for entry in data.get("schedules") or []
            ]
            bookings = [
                BookingRecord(**entry).to_domain(timezone)
                for entry in data.get("bookings") or []
            ]
        except (ValidationError, TypeError, ValueError) as exc:
            raise DataFileError(f"Invalid entry in {data_file}: {exc}") from exc

        logger.debug(
            "Loaded %d schedule(s) and %d booking(s) from %s",
            len(schedules), len(bookings), data_file,
        )
        return cls(schedules=schedules, bookings=bookings)

    def add_schedule(self, schedule: WorkSchedule) -> None:
        """
        Validate and store a schedule.

        Raises:
            InvalidScheduleError: If the schedule is invalid or a second
                active schedule exists for the same provider, location and day
        """
        validate_schedule(schedule)

        if schedule.is_active and self.find_active_schedule(
            schedule.provider_id, schedule.location_id, schedule.day_of_week
        ):
            message = (
                f"{schedule.day_name()} can only have one active schedule per "
                f"provider and location ({schedule.provider_id}@{schedule.location_id})"
            )
            raise InvalidScheduleError(message, errors=[message])

        self._schedules.append(schedule)

    def add_booking(self, booking: Booking) -> None:
        self._bookings.append(booking)

    def find_active_schedule(
        self,
        provider_id: str,
        location_id: str,
        weekday: int,
    ) -> WorkSchedule | None:
        for schedule in self._schedules:
            if (
                schedule.is_active
                and schedule.provider_id == provider_id
                and schedule.location_id == location_id
                and schedule.day_of_week == weekday
            ):
                return schedule
        return None

    def find_active_schedules(self, provider_id: str, location_id: str) -> List[WorkSchedule]:
        schedules = [
            schedule for schedule in self._schedules
            if schedule.is_active
            and schedule.provider_id == provider_id
            and schedule.location_id == location_id
        ]
        return sorted(schedules, key=lambda schedule: schedule.day_of_week)

    def find_bookings(
        self,
        provider_id: str,
        location_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[Booking]:
        bookings = [
            booking for booking in self._bookings
            if booking.provider_id == provider_id
            and booking.location_id == location_id
            and start <= booking.start <= end
        ]
        return sorted(bookings, key=lambda booking: booking.start)
