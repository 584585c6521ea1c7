"""
Derived-field recomputation for the drive log.

refresh_derived() is the one path every log-mutating transition goes
through. Hour totals and streak counts are rebuilt from the remaining drives
every time (no stored deltas), so add/update/delete can't drift apart.
The one exception is streaks.longest, a high-water mark that never
decreases even when the drives behind it are deleted.
"""
from datetime import date
from typing import Iterable, Optional, Tuple

from drively.analysis.streaks import calculate_current_streak, calculate_longest_streak
from drively.models.document import Document, Drive, StreakState, UserProfile


def completed_hours(drives: Iterable[Drive]) -> Tuple[float, float]:
    """
    Sum drive durations into (day_hours, night_hours).

    Minutes are summed first and divided once so the same drive set always
    yields bit-identical totals regardless of order.
    """
    day_minutes = 0
    night_minutes = 0
    for drive in drives:
        if drive.is_night_drive:
            night_minutes += drive.duration
        else:
            day_minutes += drive.duration
    return day_minutes / 60, night_minutes / 60


def latest_drive_date(drives: Iterable[Drive]) -> Optional[date]:
    return max((d.date for d in drives), default=None)


def refresh_streaks(streaks: StreakState, drives: Iterable[Drive], today: date) -> StreakState:
    drives = list(drives)
    return streaks.model_copy(update={
        "current": calculate_current_streak(drives, today),
        "longest": max(streaks.longest, calculate_longest_streak(drives)),
        "last_drive_date": latest_drive_date(drives),
    })


def refresh_user_hours(user: UserProfile, drives: Iterable[Drive]) -> UserProfile:
    day_hours, night_hours = completed_hours(drives)
    return user.model_copy(update={
        "completed_day_hours": day_hours,
        "completed_night_hours": night_hours,
    })


def refresh_derived(document: Document, today: date) -> Document:
    """Return a copy of document with hour totals and streaks rebuilt from its drives."""
    return document.model_copy(update={
        "user": refresh_user_hours(document.user, document.drives),
        "streaks": refresh_streaks(document.streaks, document.drives, today),
    })
