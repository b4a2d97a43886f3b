"""
Validation of schedule definitions before they reach the engine.

The engine assumes clean input; whatever loads schedules calls these
checks first.
"""

from itertools import combinations
from typing import Any, Dict, List, Sequence

from .exceptions import InvalidScheduleError
from .interval_overlap import overlaps
from .models import WorkPeriod, WorkSchedule
from .time_parsing import is_valid_time_format, parse_time_to_minutes


def _start_end(period: Any) -> tuple:
    if isinstance(period, WorkPeriod):
        return period.start, period.end
    if isinstance(period, dict):
        return period.get("start"), period.get("end")
    return None, None


def validate_work_periods(periods: Sequence[WorkPeriod | Dict[str, Any]] | None) -> List[str]:
    """
    Check the format, ordering and mutual overlap of work periods.

    Args:
        periods: WorkPeriod objects or {"start": "HH:MM", "end": "HH:MM"} dicts

    Returns:
        List of error messages; empty when the periods are valid
    """
    if not periods:
        return []

    errors: List[str] = []
    bounds: List[tuple] = []

    for index, period in enumerate(periods, start=1):
        start, end = _start_end(period)

        if not (is_valid_time_format(start) and is_valid_time_format(end)):
            errors.append(f"period {index} has invalid time format (must be HH:MM)")
            continue

        start_minutes = parse_time_to_minutes(start)
        end_minutes = parse_time_to_minutes(end)

        if start_minutes >= end_minutes:
            errors.append(f"period {index} end time must be after start time")
            continue

        bounds.append((start, end, start_minutes, end_minutes))

    # Overlap checks are unreliable once any period is malformed
    if errors:
        return errors

    for first, second in combinations(bounds, 2):
        if overlaps(first[2], first[3], second[2], second[3]):
            errors.append(
                f"periods {first[0]}-{first[1]} and {second[0]}-{second[1]} overlap"
            )

    return errors


def validate_schedule(schedule: WorkSchedule) -> None:
    """
    Validate a whole schedule.

    Raises:
        InvalidScheduleError: With every problem found
    """
    errors: List[str] = []

    if schedule.day_of_week not in range(7):
        errors.append(f"day_of_week must be between 0 and 6, got {schedule.day_of_week}")

    if schedule.slot_duration_minutes <= 0:
        errors.append("slot_duration_minutes must be greater than zero")

    if schedule.slot_buffer_minutes < 0:
        errors.append("slot_buffer_minutes must not be negative")

    period_errors = validate_work_periods(schedule.work_periods)
    errors.extend(f"work_periods: {message}" for message in period_errors)

    if not period_errors and schedule.work_periods and schedule.slot_duration_minutes > 0:
        longest = max(
            parse_time_to_minutes(p.end) - parse_time_to_minutes(p.start)
            for p in schedule.work_periods
        )
        if longest < schedule.slot_duration_minutes:
            errors.append(
                f"slot_duration_minutes is too long for the work periods "
                f"({longest} minutes available)"
            )

    if errors:
        raise InvalidScheduleError(
            f"Invalid schedule for {_describe(schedule)}: " + "; ".join(errors),
            errors=errors,
        )


def _describe(schedule: WorkSchedule) -> str:
    day = schedule.day_name() if schedule.day_of_week in range(7) else str(schedule.day_of_week)
    return f"{schedule.provider_id or '?'}@{schedule.location_id or '?'} on {day}"
