"""
Clock-time and calendar-day helpers for logged drives.

All times are "HH:MM" 24-hour strings and all dates are "YYYY-MM-DD".
Every function here is pure; the current date, when needed, is passed in.

Parsing never coerces garbage to 0. Malformed input raises ParseError so
callers can reject it at the input boundary.
"""
import re
from datetime import date, datetime

from drively.errors import ParseError

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"([0-1]?[0-9]|2[0-3]):[0-5][0-9]")
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


# ─── Validation ───────────────────────────────────────────────────────────────

def is_valid_time(value: str) -> bool:
    """Return True if value is a 24-hour "HH:MM" (or "H:MM") string."""
    return isinstance(value, str) and bool(_TIME_RE.fullmatch(value))


def is_valid_date(value: str) -> bool:
    """Return True if value is "YYYY-MM-DD" and names a real calendar day."""
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_date(value: str) -> date:
    """
    Parse a "YYYY-MM-DD" string.

    Raises:
        ParseError: if the string is not a valid calendar date.
    """
    if not is_valid_date(value):
        raise ParseError(f"Invalid date {value!r}; expected YYYY-MM-DD")
    return date.fromisoformat(value)


# ─── Clock-time arithmetic ────────────────────────────────────────────────────

def time_to_minutes(value: str) -> int:
    """
    Convert "HH:MM" to minutes since midnight.

    Raises:
        ParseError: if value is not a valid 24-hour time.
    """
    if not is_valid_time(value):
        raise ParseError(f"Invalid time {value!r}; expected HH:MM")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def is_night_time(value: str, night_start: str = "18:00", night_end: str = "06:00") -> bool:
    """
    Return True if value falls inside the night window.

    Both boundaries are inclusive. When night_start is later than night_end
    the window wraps midnight, e.g. 22:00 to 05:00.
    """
    t = time_to_minutes(value)
    start = time_to_minutes(night_start)
    end = time_to_minutes(night_end)

    if start > end:
        return t >= start or t <= end
    return start <= t <= end


def calculate_duration(start_time: str, end_time: str) -> int:
    """
    Minutes between two clock times. An end earlier than the start is
    treated as crossing midnight.

    This is wall-clock span only; a drive's recorded duration excludes
    paused time and is never re-derived from it.
    """
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    if end < start:
        return MINUTES_PER_DAY - start + end
    return end - start


# ─── Formatting ───────────────────────────────────────────────────────────────

def format_duration(minutes: int) -> str:
    """Format minutes as "45m", "2h" or "2h 30m"."""
    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


def minutes_to_hours(minutes: float) -> float:
    """Decimal hours rounded to 2 places."""
    return round(minutes / 60, 2)


def format_date_for_storage(day: date) -> str:
    return day.isoformat()


def format_date_for_display(value: str) -> str:
    """Format "2024-12-15" as "Dec 15, 2024"."""
    day = parse_date(value)
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def format_time_for_display(value: str) -> str:
    """Format "18:30" as "6:30 PM"."""
    total = time_to_minutes(value)
    hours, minutes = divmod(total, 60)
    suffix = "AM" if hours < 12 else "PM"
    hour12 = hours % 12 or 12
    return f"{hour12}:{minutes:02d} {suffix}"


def current_time(now: datetime) -> str:
    return now.strftime("%H:%M")

