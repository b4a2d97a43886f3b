"""
Tests for OverlapChecker.
"""

from datetime import timedelta

import pendulum

from slotplanner.domain.models import Booking
from slotplanner.domain.overlap_checker import OverlapChecker

TZ = "Europe/Berlin"


def _at(clock: str) -> pendulum.DateTime:
    return pendulum.parse(f"2025-01-06 {clock}", tz=TZ)


def _booking(clock: str, minutes: int | None = 60, booking_id: str | None = None) -> Booking:
    return Booking(start=_at(clock), duration_minutes=minutes, booking_id=booking_id)


class TestOverlapsAny:
    """Tests for overlaps_any()."""

    def test_booking_within_range(self):
        checker = OverlapChecker([_booking("10:00")])

        assert checker.overlaps_any(_at("09:30"), _at("12:00"))

    def test_booking_before_range(self):
        checker = OverlapChecker([_booking("08:00")])

        assert not checker.overlaps_any(_at("09:30"), _at("10:30"))

    def test_booking_after_range(self):
        checker = OverlapChecker([_booking("14:00")])

        assert not checker.overlaps_any(_at("09:00"), _at("10:00"))

    def test_booking_starting_at_range_start(self):
        checker = OverlapChecker([_booking("10:00")])

        assert checker.overlaps_any(_at("10:00"), _at("10:15"))

    def test_booking_ending_at_range_start(self):
        """A booking ending exactly when the range starts does not collide."""
        checker = OverlapChecker([_booking("09:00")])

        assert not checker.overlaps_any(_at("10:00"), _at("11:00"))

    def test_booking_starting_at_range_end(self):
        checker = OverlapChecker([_booking("11:00")])

        assert not checker.overlaps_any(_at("10:00"), _at("11:00"))

    def test_booking_starting_just_before_range_end(self):
        checker = OverlapChecker([_booking("10:59")])

        assert checker.overlaps_any(_at("10:00"), _at("11:00"))

    def test_booking_containing_range(self):
        checker = OverlapChecker([_booking("09:00", minutes=240)])

        assert checker.overlaps_any(_at("10:00"), _at("11:00"))

    def test_one_of_many_bookings_overlaps(self):
        checker = OverlapChecker([_booking("08:00"), _booking("10:30"), _booking("15:00")])

        assert checker.overlaps_any(_at("10:00"), _at("11:00"))

    def test_empty_bookings(self):
        checker = OverlapChecker([])

        assert not checker.overlaps_any(_at("10:00"), _at("11:00"))
        assert checker.find_overlapping(_at("10:00"), _at("11:00")) == []


class TestFindOverlapping:
    """Tests for find_overlapping()."""

    def test_returns_matching_subset(self):
        early = _booking("08:00", booking_id="early")
        mid = _booking("10:30", booking_id="mid")
        late = _booking("11:45", booking_id="late")
        checker = OverlapChecker([early, mid, late])

        found = checker.find_overlapping(_at("10:00"), _at("12:00"))

        assert [b.booking_id for b in found] == ["mid", "late"]

    def test_returns_empty_when_nothing_overlaps(self):
        checker = OverlapChecker([_booking("08:00"), _booking("15:00")])

        assert checker.find_overlapping(_at("10:00"), _at("11:00")) == []


class TestDurations:
    """Tests for the duration precedence rules."""

    def test_bookings_keep_their_own_duration(self):
        checker = OverlapChecker([_booking("09:00", minutes=30), _booking("13:00", minutes=120)])

        assert not checker.overlaps_any(_at("09:30"), _at("10:00"))
        assert checker.overlaps_any(_at("14:30"), _at("15:00"))

    def test_explicit_duration_overrides_booking_duration(self):
        checker = OverlapChecker([_booking("10:00", minutes=30)], duration=90)

        assert checker.overlaps_any(_at("11:00"), _at("11:30"))

    def test_default_duration_used_when_booking_has_none(self):
        """Without a stored duration the 50 minute default applies."""
        checker = OverlapChecker([_booking("10:00", minutes=None)])

        assert checker.overlaps_any(_at("10:45"), _at("11:00"))
        assert not checker.overlaps_any(_at("10:50"), _at("11:00"))

    def test_configured_default_duration(self):
        checker = OverlapChecker([_booking("10:00", minutes=None)], default_duration=timedelta(minutes=20))

        assert not checker.overlaps_any(_at("10:20"), _at("11:00"))
        assert checker.overlaps_any(_at("10:19"), _at("11:00"))


class TestMinuteOffsetInstants:
    """Bookings and ranges expressed as minutes since midnight."""

    def test_stored_duration(self):
        checker = OverlapChecker([Booking(start=600, duration_minutes=60)])

        assert checker.overlaps_any(630, 700)
        assert not checker.overlaps_any(660, 720)

    def test_default_duration(self):
        checker = OverlapChecker([Booking(start=600)], default_duration=timedelta(minutes=75))

        assert checker.overlaps_any(674, 700)
        assert not checker.overlaps_any(675, 700)

    def test_explicit_duration(self):
        checker = OverlapChecker([Booking(start=600, duration_minutes=10)], duration=30)

        assert [b.start for b in checker.find_overlapping(620, 640)] == [600]
