"""Goal-progress figures and the shareable progress summary."""
from dataclasses import dataclass
from typing import Iterable

from drively.analysis.times import (
    format_date_for_display,
    format_duration,
    format_time_for_display,
    minutes_to_hours,
)
from drively.models.document import Drive, StreakState, UserProfile


@dataclass
class ProgressSummary:
    day_percent: float
    night_percent: float
    total_percent: float
    total_hours: float
    goal_hours: float
    remaining_day_hours: float
    remaining_night_hours: float

    @property
    def day_percent_capped(self) -> float:
        return min(self.day_percent, 100.0)

    @property
    def night_percent_capped(self) -> float:
        return min(self.night_percent, 100.0)

    @property
    def total_percent_capped(self) -> float:
        return min(self.total_percent, 100.0)


@dataclass
class DriveStats:
    count: int
    total_minutes: int
    night_count: int
    average_minutes: float

    @property
    def total_hours(self) -> float:
        return minutes_to_hours(self.total_minutes)


def _percent(done: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return done / goal * 100


def build_progress(user: UserProfile) -> ProgressSummary:
    """
    Percent complete per category. A zero night goal counts as fully met
    (some license programs require no night hours).
    """
    total = user.completed_day_hours + user.completed_night_hours
    goal = user.goal_day_hours + user.goal_night_hours
    night = (
        _percent(user.completed_night_hours, user.goal_night_hours)
        if user.goal_night_hours > 0
        else 100.0
    )
    return ProgressSummary(
        day_percent=_percent(user.completed_day_hours, user.goal_day_hours),
        night_percent=night,
        total_percent=_percent(total, goal),
        total_hours=total,
        goal_hours=goal,
        remaining_day_hours=max(0.0, user.goal_day_hours - user.completed_day_hours),
        remaining_night_hours=max(0.0, user.goal_night_hours - user.completed_night_hours),
    )


def drive_stats(drives: Iterable[Drive]) -> DriveStats:
    drives = list(drives)
    total = sum(d.duration for d in drives)
    return DriveStats(
        count=len(drives),
        total_minutes=total,
        night_count=sum(1 for d in drives if d.is_night_drive),
        average_minutes=total / len(drives) if drives else 0.0,
    )


def format_share_message(user: UserProfile, streaks: StreakState) -> str:
    """Plain-text progress summary for sharing."""
    progress = build_progress(user)
    return (
        "My Driving Progress with Drively:\n\n"
        f"{progress.total_hours:.1f} / {progress.goal_hours:g} hours completed "
        f"({round(progress.total_percent)}%)\n"
        f"Day driving: {user.completed_day_hours:.1f} / {user.goal_day_hours:g} hours\n"
        f"Night driving: {user.completed_night_hours:.1f} / {user.goal_night_hours:g} hours\n\n"
        f"Current streak: {streaks.current} days\n"
        f"Longest streak: {streaks.longest} days"
    )


def format_drive_line(drive: Drive) -> str:
    """One-line drive summary, e.g. "Dec 15, 2024  6:30 PM-7:45 PM  1h 15m (night)"."""
    line = (
        f"{format_date_for_display(drive.date.isoformat())}  "
        f"{format_time_for_display(drive.start_time)}-{format_time_for_display(drive.end_time)}  "
        f"{format_duration(drive.duration)}"
    )
    if drive.is_night_drive:
        line += " (night)"
    return line
