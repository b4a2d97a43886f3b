"""
Tests for schedule validation.
"""

import pytest

from slotplanner.domain.exceptions import InvalidScheduleError
from slotplanner.domain.models import WorkPeriod, WorkSchedule
from slotplanner.domain.validation import validate_schedule, validate_work_periods


def _schedule(**overrides) -> WorkSchedule:
    values = dict(
        provider_id="dr-lee",
        location_id="main",
        day_of_week=0,
        work_periods=(WorkPeriod("09:00", "12:00"), WorkPeriod("13:00", "17:00")),
        slot_duration_minutes=60,
        slot_buffer_minutes=15,
    )
    values.update(overrides)
    return WorkSchedule(**values)


class TestValidateWorkPeriods:
    """Tests for validate_work_periods()."""

    def test_valid_periods(self):
        assert validate_work_periods([
            {"start": "09:00", "end": "12:00"},
            {"start": "12:00", "end": "17:00"},
        ]) == []

    def test_empty_periods_are_valid(self):
        assert validate_work_periods([]) == []
        assert validate_work_periods(None) == []

    def test_invalid_format(self):
        errors = validate_work_periods([{"start": "9am", "end": "12:00"}])

        assert errors == ["period 1 has invalid time format (must be HH:MM)"]

    def test_end_before_start(self):
        errors = validate_work_periods([WorkPeriod("09:00", "12:00"), WorkPeriod("15:00", "14:00")])

        assert errors == ["period 2 end time must be after start time"]

    def test_overlapping_periods(self):
        errors = validate_work_periods([WorkPeriod("09:00", "12:00"), WorkPeriod("11:00", "14:00")])

        assert errors == ["periods 09:00-12:00 and 11:00-14:00 overlap"]

    def test_overlap_not_reported_alongside_format_errors(self):
        errors = validate_work_periods([
            WorkPeriod("09:00", "12:00"),
            WorkPeriod("11:00", "14:00"),
            WorkPeriod("xx", "15:00"),
        ])

        assert errors == ["period 3 has invalid time format (must be HH:MM)"]


class TestValidateSchedule:
    """Tests for validate_schedule()."""

    def test_valid_schedule(self):
        validate_schedule(_schedule())

    def test_collects_every_error(self):
        schedule = _schedule(day_of_week=7, slot_duration_minutes=0, slot_buffer_minutes=-5)

        with pytest.raises(InvalidScheduleError) as exc_info:
            validate_schedule(schedule)

        assert exc_info.value.errors == [
            "day_of_week must be between 0 and 6, got 7",
            "slot_duration_minutes must be greater than zero",
            "slot_buffer_minutes must not be negative",
        ]

    def test_period_errors_are_prefixed(self):
        schedule = _schedule(work_periods=(WorkPeriod("12:00", "09:00"),))

        with pytest.raises(InvalidScheduleError, match="work_periods: period 1 end time"):
            validate_schedule(schedule)

    def test_slot_longer_than_every_period(self):
        schedule = _schedule(
            work_periods=(WorkPeriod("09:00", "09:30"), WorkPeriod("10:00", "10:45")),
            slot_duration_minutes=60,
        )

        with pytest.raises(InvalidScheduleError, match=r"too long .*\(45 minutes available\)"):
            validate_schedule(schedule)
