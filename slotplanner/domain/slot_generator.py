"""
Discretization of work periods into fixed-size bookable slots.

Pure domain logic: schedules and bookings are handed in, nothing is fetched.
"""

import logging
from datetime import timedelta
from typing import Iterable, List, Sequence

from pendulum import Date

from .models import AvailableSlot, Booking, SlotConfiguration, SlotStatus, WorkSchedule
from .overlap_checker import OverlapChecker

logger = logging.getLogger(__name__)


class SlotGenerator:
    """
    Generates candidate appointment slots and tags them available or busy.

    Algorithm:
    1. For each date in the range, pick the active schedule for its weekday
    2. Anchor the schedule's work periods to that date
    3. Inside each work period, step from its opening instant by
       slot duration + buffer, emitting only slots that end by the close
    4. Mark a slot busy if any booking overlaps it or its trailing buffer

    A booking without a stored duration lasts ``default_booking_duration``
    or, when that is None, the day's slot duration plus buffer.
    """

    def __init__(
        self,
        schedules: Iterable[WorkSchedule] | WorkSchedule,
        bookings: Iterable[Booking],
        location_id: str | None = None,
        timezone: str = "UTC",
        default_booking_duration: timedelta | int | None = None,
    ):
        if isinstance(schedules, WorkSchedule):
            schedules = [schedules]
        schedules = list(schedules)

        self.location_id = location_id
        if self.location_id is None and schedules:
            self.location_id = schedules[0].location_id

        self.timezone = timezone
        self._schedules = [
            schedule for schedule in schedules
            if self.location_id is None or schedule.location_id in (None, self.location_id)
        ]
        self.default_booking_duration = default_booking_duration
        self._bookings = [
            booking for booking in bookings
            if not booking.cancelled and self._same_location(booking.location_id)
        ]

    def generate(self, start_date: Date, end_date: Date) -> List[AvailableSlot]:
        """
        Generate slots for every day from start_date to end_date inclusive.

        Returns:
            Slots ordered by date, then by time within each work period
        """
        if not self._schedules:
            return []

        slots: List[AvailableSlot] = []
        current = start_date

        while current <= end_date:
            schedule = self._schedule_for(current)
            if schedule is not None:
                slots.extend(self.generate_for_day(current, schedule))
            current += timedelta(days=1)

        return slots

    def generate_for_day(self, date: Date, schedule: WorkSchedule) -> List[AvailableSlot]:
        """Generate the slots of one day, restarting inside each work period."""
        config = schedule.slot_configuration_for_date(date, self.timezone)

        if not self._is_steppable(config):
            logger.warning(
                "Skipping %s: slot duration %s with buffer %s cannot produce slots",
                date.isoformat(), config.duration, config.buffer,
            )
            return []

        checker = OverlapChecker(
            self._bookings,
            default_duration=schedule.booking_duration(self.default_booking_duration),
        )
        slots: List[AvailableSlot] = []
        step = config.total_slot_duration()

        for period in config.periods:
            slot_start = period.start

            while slot_start + config.duration <= period.end:
                slot_end = slot_start + config.duration
                slots.append(
                    AvailableSlot(
                        start=slot_start,
                        end=slot_end,
                        # Booking this slot would also hold its buffer
                        status=self._status_for(checker, slot_start, slot_end + config.buffer),
                        location_id=self.location_id,
                    )
                )
                slot_start += step

        return slots

    def _schedule_for(self, date: Date) -> WorkSchedule | None:
        for schedule in self._schedules:
            if schedule.applies_to(date):
                return schedule
        return None

    @staticmethod
    def _status_for(checker: OverlapChecker, start, end) -> SlotStatus:
        if checker.overlaps_any(start, end):
            return SlotStatus.BUSY
        return SlotStatus.AVAILABLE

    def _same_location(self, location_id: str | None) -> bool:
        return self.location_id is None or location_id in (None, self.location_id)

    @staticmethod
    def _is_steppable(config: SlotConfiguration) -> bool:
        zero = timedelta(0)
        return config.duration > zero and config.total_slot_duration() > zero


def count_available(slots: Sequence[AvailableSlot]) -> int:
    """Count slots whose status is available."""
    return sum(1 for slot in slots if slot.is_available)
