"""Time-of-day helpers. Times are integer minutes after midnight internally."""
from __future__ import annotations

import re
from datetime import date

DAY_START = 0
DAY_END = 23 * 60 + 59

_HHMM = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ScheduleInputError(ValueError):
    """Raised when call-level input (date, wake time, meal times) is invalid."""


def parse_time(value: str, *, field: str = "time") -> int:
    """Parse an ``HH:MM`` 24-hour string into minutes after midnight."""
    match = _HHMM.match((value or "").strip())
    if not match:
        raise ScheduleInputError(f"Invalid {field} {value!r}; expected HH:MM (24-hour).")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(minutes: int) -> str:
    minutes = clamp(minutes, DAY_START, DAY_END)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def validate_calendar_date(value: str) -> str:
    """Return the date string unchanged after checking it is an ISO calendar date."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise ScheduleInputError(f"Invalid date {value!r}; expected YYYY-MM-DD.")
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise ScheduleInputError(f"Invalid date {value!r}; expected YYYY-MM-DD.") from exc
    return value


def slot_label(minutes: int) -> str:
    """Quarter the day; the last quarter splits into evening and night at 22:00."""
    if minutes < 6 * 60:
        return "night"
    if minutes < 12 * 60:
        return "morning"
    if minutes < 18 * 60:
        return "afternoon"
    if minutes < 22 * 60:
        return "evening"
    return "night"
