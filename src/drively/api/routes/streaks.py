"""Streak, freeze-day, progress and reminder routes."""
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from drively.analysis.progress import build_progress, drive_stats
from drively.analysis.reminders import build_reminders
from drively.analysis.streaks import (
    can_use_freeze_day,
    effective_freeze_days_this_month,
    should_suggest_freeze_day,
)
from drively.api.deps import get_coordinator, state_error_to_http
from drively.config import get_settings
from drively.errors import StateError
from drively.models.document import StreakState
from drively.state.coordinator import StateCoordinator

router = APIRouter()


class StreakResponse(BaseModel):
    streaks: StreakState
    freeze_days_remaining: int
    can_use_freeze_day: bool
    suggest_freeze_day: bool


class ProgressResponse(BaseModel):
    day_percent: float
    night_percent: float
    total_percent: float
    total_hours: float
    goal_hours: float
    remaining_day_hours: float
    remaining_night_hours: float
    day_percent_capped: float
    night_percent_capped: float
    total_percent_capped: float
    logged_hours: float
    drive_count: int
    night_drive_count: int
    total_minutes: int
    average_minutes: float


class ReminderResponse(BaseModel):
    kind: str
    message: str


def _streak_response(coordinator: StateCoordinator) -> StreakResponse:
    streaks = coordinator.document.streaks
    cap = coordinator.freeze_cap
    today = coordinator.today()
    used = effective_freeze_days_this_month(
        streaks.freeze_days_this_month, streaks.last_freeze_reset, today
    )
    streaks = streaks.model_copy(update={"freeze_days_this_month": used})
    return StreakResponse(
        streaks=streaks,
        freeze_days_remaining=max(0, cap - streaks.freeze_days_this_month),
        can_use_freeze_day=can_use_freeze_day(streaks.freeze_days_this_month, cap),
        suggest_freeze_day=should_suggest_freeze_day(
            streaks.last_drive_date,
            streaks.freeze_days_this_month,
            today,
            cap=cap,
        ),
    )


@router.get("/streaks", response_model=StreakResponse)
async def get_streaks(coordinator: StateCoordinator = Depends(get_coordinator)):
    return _streak_response(coordinator)


@router.post("/streaks/freeze", response_model=StreakResponse)
async def use_freeze_day(coordinator: StateCoordinator = Depends(get_coordinator)):
    """Spend one of this month's freeze days. 409 once the monthly cap is reached."""
    try:
        coordinator.use_freeze_day()
    except StateError as exc:
        raise state_error_to_http(exc)
    return _streak_response(coordinator)


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(coordinator: StateCoordinator = Depends(get_coordinator)):
    document = coordinator.document
    progress = build_progress(document.user)
    stats = drive_stats(document.drives)
    return ProgressResponse(
        day_percent=progress.day_percent,
        night_percent=progress.night_percent,
        total_percent=progress.total_percent,
        total_hours=progress.total_hours,
        goal_hours=progress.goal_hours,
        remaining_day_hours=progress.remaining_day_hours,
        remaining_night_hours=progress.remaining_night_hours,
        day_percent_capped=progress.day_percent_capped,
        night_percent_capped=progress.night_percent_capped,
        total_percent_capped=progress.total_percent_capped,
        logged_hours=stats.total_hours,
        drive_count=stats.count,
        night_drive_count=stats.night_count,
        total_minutes=stats.total_minutes,
        average_minutes=stats.average_minutes,
    )


@router.get("/reminders", response_model=List[ReminderResponse])
async def get_reminders(coordinator: StateCoordinator = Depends(get_coordinator)):
    reminders = build_reminders(
        coordinator.document,
        coordinator.today(),
        backup_interval_days=get_settings().backup_reminder_days,
        freeze_cap=coordinator.freeze_cap,
    )
    return [ReminderResponse(kind=r.kind, message=r.message) for r in reminders]
