"""
Capacity metrics derived from a work schedule.
"""

from .models import WorkSchedule
from .time_parsing import parse_time_to_minutes


def total_work_minutes(schedule: WorkSchedule) -> int:
    """Sum the lengths of all well-formed work periods, in minutes."""
    total = 0
    for period in schedule.work_periods:
        start = parse_time_to_minutes(period.start)
        end = parse_time_to_minutes(period.end)
        if start is None or end is None or end <= start:
            continue
        total += end - start
    return total


def max_appointments_per_day(schedule: WorkSchedule) -> int:
    """How many slot + buffer blocks fit into the day's total work time."""
    minutes = total_work_minutes(schedule)
    if minutes == 0 or schedule.slot_duration_minutes <= 0:
        return 0

    block = schedule.slot_duration_minutes + max(schedule.slot_buffer_minutes, 0)
    return minutes // block
