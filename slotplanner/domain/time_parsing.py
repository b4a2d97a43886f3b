"""
Parsing helpers for "HH:MM" strings used in work period definitions.
"""

import re
from typing import Any, Tuple

TIME_FORMAT_REGEX = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
DURATION_REGEX = re.compile(r"^\d+$")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_time_to_minutes(value: Any) -> int | None:
    """
    Convert a time-of-day or a duration into minutes.

    Args:
        value: "HH:MM" (minutes since midnight), a numeric string
            (a duration in minutes) or an int (passed through)

    Returns:
        Minutes, or None when the value is blank or malformed
    """
    if _is_blank(value) or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    text = str(value).strip()

    if DURATION_REGEX.match(text):
        return int(text)

    parsed = parse_time_string(text)
    if parsed is None:
        return None

    hour, minute = parsed
    return hour * 60 + minute


def parse_time_string(value: Any) -> Tuple[int, int] | None:
    """Parse "HH:MM" into an ``(hour, minute)`` tuple, or None if invalid."""
    if not is_valid_time_format(value):
        return None

    hours, minutes = value.strip().split(":")
    return int(hours), int(minutes)


def is_valid_time_format(value: Any) -> bool:
    """Check if a value is an "HH:MM" string with a 0-23 hour and 0-59 minute."""
    if not isinstance(value, str) or _is_blank(value):
        return False
    return TIME_FORMAT_REGEX.match(value.strip()) is not None
