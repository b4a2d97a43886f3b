"""
Overlap and containment predicates over raw half-open intervals.

Both functions work with any ordered type: pendulum/datetime instants,
``datetime.time`` values or plain integers such as minutes since midnight.

    >>> overlaps(540, 720, 660, 840)
    True
    >>> overlaps(9, 12, 12, 15)
    False
    >>> contains(9, 17, 10, 12)
    True
"""

from typing import Any


def overlaps(start1: Any, end1: Any, start2: Any, end2: Any) -> bool:
    """
    Check whether ``[start1, end1)`` and ``[start2, end2)`` share any instant.

    Touching intervals (``end1 == start2``) do not overlap. A degenerate
    interval (start not before end) never overlaps anything.
    """
    if not (start1 < end1 and start2 < end2):
        return False
    return start1 < end2 and start2 < end1


def contains(outer_start: Any, outer_end: Any, inner_start: Any, inner_end: Any) -> bool:
    """Check whether ``[inner_start, inner_end)`` lies within ``[outer_start, outer_end)``."""
    return outer_start <= inner_start and inner_end <= outer_end
