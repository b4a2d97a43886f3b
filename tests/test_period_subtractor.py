"""
Tests for subtracting booked time from free periods.
"""

from itertools import permutations

import pendulum

from slotplanner.domain.models import TimePeriod
from slotplanner.domain.period_subtractor import (
    PeriodSubtractorService,
    subtract_time_range,
    subtract_time_ranges,
)

TZ = "Europe/Berlin"


def _at(clock: str) -> pendulum.DateTime:
    return pendulum.parse(f"2025-01-06 {clock}", tz=TZ)


def _p(start: int, end: int) -> TimePeriod:
    return TimePeriod(start=start, end=end)


MORNING = _p(540, 720)  # 09:00-12:00 in minutes since midnight


class TestSubtractionCases:
    """One test per subtraction case."""

    def test_no_overlap_after_period(self):
        assert subtract_time_range([MORNING], _p(720, 780)) == [MORNING]

    def test_no_overlap_before_period(self):
        assert subtract_time_range([MORNING], _p(480, 540)) == [MORNING]

    def test_complete_overlap_removes_period(self):
        assert subtract_time_range([MORNING], _p(480, 780)) == []

    def test_subtracting_period_from_itself_is_empty(self):
        assert subtract_time_range([MORNING], MORNING) == []

    def test_overlapping_start_keeps_end_portion(self):
        assert subtract_time_range([MORNING], _p(480, 600)) == [_p(600, 720)]

    def test_range_starting_with_period_keeps_end_portion(self):
        assert subtract_time_range([MORNING], _p(540, 600)) == [_p(600, 720)]

    def test_overlapping_end_keeps_start_portion(self):
        assert subtract_time_range([MORNING], _p(660, 780)) == [_p(540, 660)]

    def test_range_inside_period_splits_it(self):
        assert subtract_time_range([MORNING], _p(600, 675)) == [_p(540, 600), _p(675, 720)]

    def test_split_pieces_and_range_reconstruct_period(self):
        """Both halves plus the removed range cover the period exactly."""
        removed = _p(600, 675)
        before, after = subtract_time_range([MORNING], removed)

        assert before.start == MORNING.start
        assert before.end == removed.start
        assert after.start == removed.end
        assert after.end == MORNING.end

    def test_zero_length_range_changes_nothing(self):
        periods = [MORNING, _p(780, 1020)]

        assert subtract_time_range(periods, _p(600, 600)) == periods
        assert subtract_time_range(periods, _p(540, 540)) == periods
        assert subtract_time_range(periods, _p(720, 720)) == periods

    def test_datetime_split_scenario(self):
        """09:00-12:00 minus 10:00-11:15 leaves 09:00-10:00 and 11:15-12:00."""
        period = TimePeriod(start=_at("09:00"), end=_at("12:00"))
        booked = TimePeriod(start=_at("10:00"), end=_at("11:15"))

        result = subtract_time_range([period], booked)

        assert result == [
            TimePeriod(start=_at("09:00"), end=_at("10:00")),
            TimePeriod(start=_at("11:15"), end=_at("12:00")),
        ]


class TestSubtractionOverLists:
    """Tests applying the subtractor to several periods and ranges."""

    def test_range_spanning_two_periods(self):
        periods = [MORNING, _p(780, 1020)]

        result = subtract_time_range(periods, _p(700, 800))

        assert result == [_p(540, 700), _p(800, 1020)]

    def test_input_list_is_not_modified(self):
        periods = [MORNING]

        subtract_time_range(periods, _p(600, 660))

        assert periods == [MORNING]

    def test_service_class_subtracts(self):
        service = PeriodSubtractorService(_p(600, 660))

        assert service.subtract([MORNING]) == [_p(540, 600), _p(660, 720)]

    def test_folding_disjoint_ranges_is_order_independent(self):
        """Disjoint bookings give the same free set whatever their order."""
        day = [MORNING, _p(780, 1020)]
        bookings = [_p(600, 660), _p(800, 830), _p(900, 960)]

        results = {
            tuple(sorted(subtract_time_ranges(day, order), key=lambda p: p.start))
            for order in permutations(bookings)
        }

        assert len(results) == 1
        assert list(results.pop()) == [
            _p(540, 600), _p(660, 720), _p(780, 800), _p(830, 900), _p(960, 1020),
        ]

    def test_folding_no_ranges_returns_copy(self):
        periods = [MORNING]

        result = subtract_time_ranges(periods, [])

        assert result == periods
        assert result is not periods
