"""
Domain layer - Pure availability and slot computation without I/O.
"""

from .exceptions import (
    AvailabilityLookupError,
    CalculationError,
    DataFileError,
    InvalidScheduleError,
    SlotPlannerError,
)
from .models import AvailableSlot, Booking, SlotConfiguration, SlotStatus, TimePeriod, WorkPeriod, WorkSchedule
from .overlap_checker import OverlapChecker
from .period_subtractor import PeriodSubtractorService, subtract_time_range, subtract_time_ranges
from .slot_generator import SlotGenerator

__all__ = [
    "AvailabilityLookupError",
    "AvailableSlot",
    "Booking",
    "CalculationError",
    "DataFileError",
    "InvalidScheduleError",
    "OverlapChecker",
    "PeriodSubtractorService",
    "SlotConfiguration",
    "SlotGenerator",
    "SlotPlannerError",
    "SlotStatus",
    "TimePeriod",
    "WorkPeriod",
    "WorkSchedule",
    "subtract_time_range",
    "subtract_time_ranges",
]
