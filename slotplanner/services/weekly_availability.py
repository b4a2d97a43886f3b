"""
Weekly availability rollup for a provider at a location.

The calculator fetches schedules and bookings for the week up front, hands
them to the ``SlotGenerator`` and groups the resulting slots by day.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from functools import cached_property
from typing import Dict, List, Sequence

import pendulum
from pendulum import Date

from ..domain.exceptions import AvailabilityLookupError, CalculationError, SlotPlannerError
from ..domain.models import AvailableSlot, Booking, WorkSchedule
from ..domain.slot_generator import SlotGenerator, count_available
from .availability_service import BookingRepository, ScheduleRepository

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class WeeklyAvailability:
    """Result of a weekly calculation."""
    week_start: Date
    week_end: Date
    slots_by_day: Dict[Date, List[AvailableSlot]] = field(default_factory=dict)
    total_slots: int = 0
    available_slots: int = 0
    bookings: List[Booking] = field(default_factory=list)
    schedules: List[WorkSchedule] = field(default_factory=list)

    @property
    def busy_slots(self) -> int:
        return self.total_slots - self.available_slots

    def week_range(self) -> tuple:
        return self.week_start, self.week_end

    def days(self) -> List[Date]:
        """All seven dates of the week, in order."""
        return [self.week_start + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]

    def slots_for(self, date: Date) -> List[AvailableSlot]:
        return list(self.slots_by_day.get(date, []))


def group_slots_by_day(slots: Sequence[AvailableSlot]) -> Dict[Date, List[AvailableSlot]]:
    """Group slots by the calendar date of their start, keeping order."""
    grouped: Dict[Date, List[AvailableSlot]] = {}
    for slot in slots:
        grouped.setdefault(slot.start.date(), []).append(slot)
    return grouped


def to_cache_payload(slots: Sequence[AvailableSlot]) -> Dict[str, List[Dict[str, str]]]:
    """
    Split slots into the two arrays a cache layer stores.

    Returns:
        {"available_periods": [...], "busy_periods": [...]} of
        {"start_time", "end_time"} ISO-8601 pairs
    """
    payload: Dict[str, List[Dict[str, str]]] = {"available_periods": [], "busy_periods": []}
    for slot in slots:
        key = "available_periods" if slot.is_available else "busy_periods"
        payload[key].append(slot.period.to_dict())
    return payload


def current_week_start(timezone: str = "UTC") -> Date:
    """Monday of the current week in the given timezone."""
    today = pendulum.today(timezone).date()
    return today - timedelta(days=today.weekday())


class WeeklyAvailabilityCalculator:
    """
    Orchestrates slot generation over a seven-day window.

    Args:
        schedules: Schedule lookup collaborator
        bookings: Booking lookup collaborator
        provider_id: Provider whose week is calculated
        location_id: Location the provider works at
        week_start: First day of the week (defaults to this week's Monday)
        timezone: Timezone the schedule is anchored in
        default_booking_duration: Minutes a booking lasts when it stores none;
            None means the schedule's slot duration plus buffer
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        bookings: BookingRepository,
        provider_id: str,
        location_id: str,
        week_start: Date | None = None,
        timezone: str = "UTC",
        default_booking_duration: timedelta | int | None = None,
    ) -> None:
        self._schedule_repository = schedules
        self._booking_repository = bookings
        self.provider_id = provider_id
        self.location_id = location_id
        self.timezone = timezone
        self.week_start = week_start or current_week_start(timezone)
        self.default_booking_duration = default_booking_duration

    @property
    def week_end(self) -> Date:
        return self.week_start + timedelta(days=DAYS_PER_WEEK - 1)

    def week_range(self) -> tuple:
        return self.week_start, self.week_end

    def call(self) -> WeeklyAvailability:
        """
        Calculate the week's slots and counts.

        Raises:
            AvailabilityLookupError: If schedules or bookings cannot be fetched
            CalculationError: If slot generation fails on bad input
        """
        try:
            slots = self.all_slots
            result = WeeklyAvailability(
                week_start=self.week_start,
                week_end=self.week_end,
                slots_by_day=group_slots_by_day(slots),
                total_slots=len(slots),
                available_slots=count_available(slots),
                bookings=list(self.bookings),
                schedules=list(self.schedules),
            )
        except SlotPlannerError:
            raise
        except (ValueError, KeyError) as exc:
            raise CalculationError(f"Failed to calculate availability: {exc}") from exc
        except Exception:
            logger.exception(
                "Unexpected error in availability calculation for %s at %s",
                self.provider_id, self.location_id,
            )
            raise

        logger.debug(
            "Week %s: %d slot(s), %d available",
            self.week_start.isoformat(), result.total_slots, result.available_slots,
        )
        return result

    @cached_property
    def schedules(self) -> List[WorkSchedule]:
        return self._lookup(
            "schedules",
            lambda: self._schedule_repository.find_active_schedules(
                self.provider_id, self.location_id
            ),
        )

    @cached_property
    def bookings(self) -> List[Booking]:
        if not self.schedules:
            return []

        start = pendulum.datetime(
            self.week_start.year, self.week_start.month, self.week_start.day, tz=self.timezone
        )
        end = start.add(days=DAYS_PER_WEEK - 1).end_of("day")
        found = self._lookup(
            "bookings",
            lambda: self._booking_repository.find_bookings(
                self.provider_id, self.location_id, start, end
            ),
        )
        return [booking for booking in found if not booking.cancelled]

    @cached_property
    def all_slots(self) -> List[AvailableSlot]:
        if not self.schedules:
            return []

        generator = SlotGenerator(
            self.schedules,
            self.bookings,
            location_id=self.location_id,
            timezone=self.timezone,
            default_booking_duration=self.default_booking_duration,
        )
        return generator.generate(self.week_start, self.week_end)

    def _lookup(self, what: str, fetch):
        try:
            return list(fetch())
        except SlotPlannerError:
            raise
        except Exception as exc:
            raise AvailabilityLookupError(
                f"Could not compute availability: failed to fetch {what} for "
                f"{self.provider_id} at {self.location_id}: {exc}"
            ) from exc
