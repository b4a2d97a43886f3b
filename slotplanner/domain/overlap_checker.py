"""
Overlap detection between candidate time ranges and booked appointments.
"""

from datetime import timedelta
from typing import Any, Iterable, List

import pendulum

from . import interval_overlap
from .models import Booking

DEFAULT_BOOKING_DURATION_MINUTES = 50


def _offset(instant: Any, duration: timedelta | int) -> Any:
    """
    Express a duration in the units of ``instant``.

    Integer instants are minute offsets, so the duration becomes whole
    minutes; datetime instants get a timedelta.
    """
    if isinstance(instant, (int, float)):
        if isinstance(duration, timedelta):
            return int(duration.total_seconds() // 60)
        return int(duration)
    if isinstance(duration, timedelta):
        return duration
    return pendulum.duration(minutes=int(duration))


class OverlapChecker:
    """
    Answers whether a time range collides with any booking.

    Each booking occupies ``[start, start + duration)``. The duration is, in
    order of precedence: the explicit ``duration`` passed here, the
    booking's own stored duration, then ``default_duration``. Bookings may
    start at datetimes or at integer minute offsets.

    Args:
        bookings: Bookings to check against
        duration: Optional duration (minutes or timedelta) forced on every booking
        default_duration: Fallback (minutes or timedelta) for bookings without one
    """

    def __init__(
        self,
        bookings: Iterable[Booking],
        duration: timedelta | int | None = None,
        default_duration: timedelta | int = DEFAULT_BOOKING_DURATION_MINUTES,
    ):
        self._bookings = list(bookings)
        self._duration = duration
        self._default_duration = default_duration

    @property
    def bookings(self) -> List[Booking]:
        return list(self._bookings)

    def overlaps_any(self, start: Any, end: Any) -> bool:
        """Check if any booking overlaps ``[start, end)``."""
        return any(self._overlaps(booking, start, end) for booking in self._bookings)

    def find_overlapping(self, start: Any, end: Any) -> List[Booking]:
        """Return the bookings that overlap ``[start, end)``."""
        return [
            booking for booking in self._bookings
            if self._overlaps(booking, start, end)
        ]

    def _booking_end(self, booking: Booking) -> Any:
        duration = self._duration
        if duration is None:
            duration = booking.duration_minutes
        if duration is None:
            duration = self._default_duration
        return booking.start + _offset(booking.start, duration)

    def _overlaps(self, booking: Booking, start: Any, end: Any) -> bool:
        return interval_overlap.overlaps(booking.start, self._booking_end(booking), start, end)
