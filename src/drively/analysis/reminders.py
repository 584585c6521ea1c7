"""
Nudges derived from the document: freeze-day suggestions and backup reminders.

Read-only; the daily scheduler job and the /reminders route both call
build_reminders() and never mutate state from it.
"""
from dataclasses import dataclass
from datetime import date
from typing import List

from drively.analysis.streaks import (
    MAX_FREEZE_DAYS_PER_MONTH,
    days_since_last_drive,
    effective_freeze_days_this_month,
    should_suggest_freeze_day,
)
from drively.models.document import Document

BACKUP_REMINDER_DAYS = 7


@dataclass
class Reminder:
    kind: str  # "freeze_day" or "backup"
    message: str


def build_reminders(
    document: Document,
    today: date,
    backup_interval_days: int = BACKUP_REMINDER_DAYS,
    freeze_cap: int = MAX_FREEZE_DAYS_PER_MONTH,
) -> List[Reminder]:
    reminders: List[Reminder] = []
    streaks = document.streaks

    used = effective_freeze_days_this_month(
        streaks.freeze_days_this_month, streaks.last_freeze_reset, today
    )
    if should_suggest_freeze_day(streaks.last_drive_date, used, today, cap=freeze_cap):
        idle = days_since_last_drive(streaks.last_drive_date, today)
        left = freeze_cap - used
        reminders.append(Reminder(
            kind="freeze_day",
            message=(
                f"No drive logged for {idle} days. Use a freeze day to protect "
                f"your streak ({left} left this month)."
            ),
        ))

    settings = document.settings
    if settings.backup_reminder and document.drives:
        last = settings.last_backup_date
        if last is None:
            reminders.append(Reminder(
                kind="backup",
                message="You haven't exported a backup yet.",
            ))
        elif (today - last).days >= backup_interval_days:
            reminders.append(Reminder(
                kind="backup",
                message=f"Last backup was {(today - last).days} days ago.",
            ))

    return reminders
