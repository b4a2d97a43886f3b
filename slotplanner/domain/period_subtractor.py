"""
Subtraction of one occupied interval from a list of free periods.
"""

from functools import reduce
from typing import Iterable, List, Sequence

from .models import TimePeriod


class PeriodSubtractorService:
    """
    Removes a single time range from every period of a list.

    Each period falls into exactly one of five cases, checked in order:

    1. no overlap      -> kept unchanged
    2. fully covered   -> dropped
    3. start covered   -> ``[range.end, period.end)``
    4. end covered     -> ``[period.start, range.start)``
    5. middle covered  -> ``[period.start, range.start)`` and ``[range.end, period.end)``

    Example:
    Period: 09:00 - 12:00
    Range:  10:00 - 11:15
    Result: [09:00-10:00, 11:15-12:00]
    """

    def __init__(self, time_range: TimePeriod):
        self.range_start = time_range.start
        self.range_end = time_range.end

    def subtract(self, periods: Iterable[TimePeriod]) -> List[TimePeriod]:
        """Return a new list with the range removed from every period."""
        result: List[TimePeriod] = []
        for period in periods:
            result.extend(self._subtract_from_period(period))
        return result

    def _subtract_from_period(self, period: TimePeriod) -> List[TimePeriod]:
        if self._no_overlap(period):
            return [period]
        if self._complete_overlap(period):
            return []
        if self._overlaps_start(period):
            return [TimePeriod(start=self.range_end, end=period.end)]
        if self._overlaps_end(period):
            return [TimePeriod(start=period.start, end=self.range_start)]
        if self._splits_period(period):
            return [
                TimePeriod(start=period.start, end=self.range_start),
                TimePeriod(start=self.range_end, end=period.end),
            ]
        return [period]

    def _no_overlap(self, period: TimePeriod) -> bool:
        # A zero-length or inverted range removes nothing.
        if not self.range_start < self.range_end:
            return True
        return self.range_end <= period.start or self.range_start >= period.end

    def _complete_overlap(self, period: TimePeriod) -> bool:
        return self.range_start <= period.start and self.range_end >= period.end

    def _overlaps_start(self, period: TimePeriod) -> bool:
        return (
            self.range_start <= period.start
            and period.start < self.range_end < period.end
        )

    def _overlaps_end(self, period: TimePeriod) -> bool:
        return (
            period.start < self.range_start < period.end
            and self.range_end >= period.end
        )

    def _splits_period(self, period: TimePeriod) -> bool:
        return period.start < self.range_start and self.range_end < period.end


def subtract_time_range(periods: Sequence[TimePeriod], time_range: TimePeriod) -> List[TimePeriod]:
    """Remove one time range from a list of free periods."""
    return PeriodSubtractorService(time_range).subtract(periods)


def subtract_time_ranges(
    periods: Sequence[TimePeriod],
    time_ranges: Iterable[TimePeriod],
) -> List[TimePeriod]:
    """Fold several time ranges through the subtractor, one pass per range."""
    return reduce(subtract_time_range, time_ranges, list(periods))
