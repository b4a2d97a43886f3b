"""
Service layer helpers that orchestrate collaborators and domain logic.
"""

from .availability_service import AvailabilityService, BookingRepository, ScheduleRepository, check_availability
from .weekly_availability import WeeklyAvailability, WeeklyAvailabilityCalculator, to_cache_payload

__all__ = [
    "AvailabilityService",
    "BookingRepository",
    "ScheduleRepository",
    "WeeklyAvailability",
    "WeeklyAvailabilityCalculator",
    "check_availability",
    "to_cache_payload",
]
