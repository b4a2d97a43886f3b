"""
Domain-specific exception hierarchy for the slot planner.
"""

from typing import List


class SlotPlannerError(Exception):
    """Base class for all application-level errors."""


class InvalidScheduleError(SlotPlannerError):
    """Raised when a schedule fails validation at the load boundary."""

    def __init__(self, message: str, errors: List[str] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


class AvailabilityLookupError(SlotPlannerError):
    """Raised when schedules or bookings cannot be fetched for a computation."""


class CalculationError(SlotPlannerError):
    """Raised when weekly availability cannot be calculated."""


class DataFileError(SlotPlannerError):
    """Raised when the schedules/bookings data file cannot be read."""
