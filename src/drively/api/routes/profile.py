"""Profile, onboarding, settings and reset routes."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from drively.api.deps import get_coordinator, state_error_to_http
from drively.errors import StateError
from drively.models.actions import GOAL_PRESET_HOURS, GoalPreset, SettingsUpdate, UserInfoUpdate
from drively.models.document import AppSettings, Document, UserProfile
from drively.state.coordinator import StateCoordinator

router = APIRouter()


class ResetRequest(BaseModel):
    confirm: bool = False


class GoalPresetResponse(BaseModel):
    preset: GoalPreset
    goal_day_hours: float
    goal_night_hours: float


@router.get("/profile", response_model=UserProfile)
async def get_profile(coordinator: StateCoordinator = Depends(get_coordinator)):
    return coordinator.document.user


@router.patch("/profile", response_model=UserProfile)
async def update_profile(
    update: UserInfoUpdate,
    coordinator: StateCoordinator = Depends(get_coordinator),
):
    """Set license type/date and goal hours. Completed hours are derived, not settable."""
    try:
        document = coordinator.set_user_info(**update.model_dump(exclude_unset=True))
    except StateError as exc:
        raise state_error_to_http(exc)
    return document.user


@router.get("/profile/presets", response_model=List[GoalPresetResponse])
async def list_goal_presets():
    """Goal presets accepted as {"preset": ...} by PATCH /profile."""
    return [
        GoalPresetResponse(preset=preset, goal_day_hours=day, goal_night_hours=night)
        for preset, (day, night) in GOAL_PRESET_HOURS.items()
    ]


@router.post("/profile/onboarding", response_model=UserProfile)
async def complete_onboarding(coordinator: StateCoordinator = Depends(get_coordinator)):
    return coordinator.complete_onboarding().user


@router.get("/settings", response_model=AppSettings)
async def get_app_settings(coordinator: StateCoordinator = Depends(get_coordinator)):
    return coordinator.document.settings


@router.patch("/settings", response_model=AppSettings)
async def update_app_settings(
    update: SettingsUpdate,
    coordinator: StateCoordinator = Depends(get_coordinator),
):
    """Applies to drives logged from now on; saved drives keep their classification."""
    try:
        document = coordinator.update_settings(**update.model_dump(exclude_unset=True))
    except StateError as exc:
        raise state_error_to_http(exc)
    return document.settings


@router.post("/settings/backup", response_model=AppSettings)
async def mark_backed_up(coordinator: StateCoordinator = Depends(get_coordinator)):
    """Record that a full backup was taken today. Quiets the backup reminder."""
    document = coordinator.update_settings(last_backup_date=coordinator.today())
    return document.settings


@router.post("/reset", response_model=Document)
async def reset(
    request: ResetRequest,
    coordinator: StateCoordinator = Depends(get_coordinator),
):
    """Delete all data. Requires {"confirm": true}."""
    if not request.confirm:
        raise HTTPException(status_code=400, detail="Reset requires confirm=true")
    return await coordinator.reset()
