"""
Free-time calculation for one provider, location and calendar date.

Work periods come from the weekday's schedule; booked time is subtracted
one booking at a time. Lookups go through small repository protocols so the
persistence layer can be swapped for a stub in tests.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, List, Protocol, Sequence

import pendulum
from pendulum import Date, DateTime

from ..domain.exceptions import AvailabilityLookupError, SlotPlannerError
from ..domain.models import Booking, TimePeriod, WorkSchedule
from ..domain.period_subtractor import subtract_time_range

logger = logging.getLogger(__name__)


class ScheduleRepository(Protocol):
    """Protocol describing the schedule lookups the engine needs."""

    def find_active_schedule(
        self,
        provider_id: str,
        location_id: str,
        weekday: int,
    ) -> WorkSchedule | None:
        """Return the active schedule for a weekday (0=Monday), if any."""

    def find_active_schedules(
        self,
        provider_id: str,
        location_id: str,
    ) -> List[WorkSchedule]:
        """Return every active schedule of a provider at a location."""


class BookingRepository(Protocol):
    """Protocol describing the booking lookup the engine needs."""

    def find_bookings(
        self,
        provider_id: str,
        location_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[Booking]:
        """Return bookings starting within ``[start, end]``."""


class AvailabilityService:
    """
    Computes the free periods of a single day.

    Args:
        date: Calendar date being computed
        schedule: Schedule governing that date, or None when the day is closed
        bookings: Bookings of that day; cancelled ones are ignored
        timezone: Timezone the work periods are anchored in
        default_booking_duration: Minutes (or timedelta) a booking lasts when it
            stores none; None means the schedule's slot duration plus buffer
    """

    def __init__(
        self,
        date: Date,
        schedule: WorkSchedule | None,
        bookings: Sequence[Booking] = (),
        timezone: str = "UTC",
        default_booking_duration: timedelta | int | None = None,
    ) -> None:
        self.date = date
        self.schedule = schedule if schedule is not None and schedule.is_active else None
        self.timezone = timezone
        self.default_booking_duration = default_booking_duration
        self.bookings = sorted(
            (booking for booking in bookings if not booking.cancelled),
            key=lambda booking: booking.start,
        )
        self._free_periods: List[TimePeriod] | None = None

    @classmethod
    def for_provider(
        cls,
        schedules: ScheduleRepository,
        bookings: BookingRepository,
        provider_id: str,
        location_id: str,
        date: Date,
        timezone: str = "UTC",
        default_booking_duration: timedelta | int | None = None,
    ) -> "AvailabilityService":
        """
        Fetch the schedule and bookings for a day, then build the service.

        Raises:
            AvailabilityLookupError: If a lookup fails
        """
        try:
            schedule = schedules.find_active_schedule(provider_id, location_id, date.weekday())
            day_bookings: List[Booking] = []
            if schedule is not None:
                day_start = pendulum.datetime(date.year, date.month, date.day, tz=timezone)
                day_bookings = bookings.find_bookings(
                    provider_id, location_id, day_start, day_start.end_of("day")
                )
        except SlotPlannerError:
            raise
        except Exception as exc:
            raise AvailabilityLookupError(
                f"Could not compute availability for {provider_id} at {location_id} "
                f"on {date.isoformat()}: {exc}"
            ) from exc

        return cls(
            date=date,
            schedule=schedule,
            bookings=day_bookings,
            timezone=timezone,
            default_booking_duration=default_booking_duration,
        )

    def work_periods(self) -> List[TimePeriod]:
        """Return the schedule's work periods anchored to the date."""
        if self.schedule is None:
            return []
        return self.schedule.periods_for_date(self.date, self.timezone)

    def free_periods(self) -> List[TimePeriod]:
        """Return the work periods with every booking subtracted."""
        if self._free_periods is None:
            self._free_periods = self._calculate_free_periods()
        return list(self._free_periods)

    def is_available(self, start: Any, end: Any) -> bool:
        """
        Check whether ``[start, end)`` fits inside a single free period.

        A range spanning two free periods (e.g. across a lunch break) is not
        available even if both halves are free.
        """
        if not start < end:
            return False

        requested = TimePeriod(start=start, end=end)
        return any(period.contains_period(requested) for period in self.free_periods())

    def total_free_minutes(self) -> int:
        """Sum the durations of all free periods, in minutes."""
        return sum(period.duration_minutes() for period in self.free_periods())

    def _calculate_free_periods(self) -> List[TimePeriod]:
        available = self.work_periods()
        if not available:
            return []

        booking_duration = self.schedule.booking_duration(self.default_booking_duration)
        for booking in self.bookings:
            available = subtract_time_range(available, booking.time_range(booking_duration))

        logger.debug(
            "%s: %d free period(s) after %d booking(s)",
            self.date.isoformat(), len(available), len(self.bookings),
        )
        return available


def check_availability(
    schedules: ScheduleRepository,
    bookings: BookingRepository,
    provider_id: str,
    location_id: str,
    start: DateTime,
    end: DateTime,
    timezone: str = "UTC",
    default_booking_duration: timedelta | int | None = None,
) -> bool:
    """Validate a prospective booking ``[start, end)`` before it is committed."""
    local_start = start.in_timezone(timezone)
    service = AvailabilityService.for_provider(
        schedules,
        bookings,
        provider_id=provider_id,
        location_id=location_id,
        date=local_start.date(),
        timezone=timezone,
        default_booking_duration=default_booking_duration,
    )
    return service.is_available(start, end)
