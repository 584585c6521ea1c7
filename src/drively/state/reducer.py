"""
Pure transition function for the application document.

reduce(state, action, today=...) -> new state. The input document is never
mutated; a rejected payload raises StateError and the caller keeps the old
state. Log-mutating transitions (ADD/UPDATE/DELETE_DRIVE) run the aggregator
in the same step so derived fields are never stale in any returned state.
"""
import logging
from datetime import date
from typing import Any, Callable, Dict

from pydantic import BaseModel, ValidationError

from drively.analysis.aggregator import refresh_derived
from drively.analysis.streaks import (
    MAX_FREEZE_DAYS_PER_MONTH,
    can_use_freeze_day,
    should_reset_monthly_freeze_counter,
)
from drively.errors import FreezeCapReachedError, StateError
from drively.models.actions import (
    GOAL_PRESET_HOURS,
    Action,
    ActionType,
    SettingsUpdate,
    UserInfoUpdate,
)
from drively.models.document import Document, Drive, UserProfile, default_document

logger = logging.getLogger(__name__)

# Fields a partial update may explicitly set to null
_NULLABLE_USER_FIELDS = {"license_type", "license_date"}
_NULLABLE_SETTINGS_FIELDS = {"last_backup_date"}


def _coerce(model: type, payload: Any, action: ActionType) -> BaseModel:
    """Validate a payload into model, converting failures to StateError."""
    if isinstance(payload, model):
        # Re-validate: model_copy/construct could have bypassed validation
        payload = payload.model_dump(by_alias=True, exclude_unset=True)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise StateError(f"{action.value}: invalid payload: {exc}") from exc


def _reject_cleared(changes: Dict[str, Any], nullable: set, action: ActionType) -> None:
    cleared = sorted(k for k, v in changes.items() if v is None and k not in nullable)
    if cleared:
        raise StateError(f"{action.value}: {', '.join(cleared)} cannot be null")


# ─── Transitions ──────────────────────────────────────────────────────────────

def _set_user_info(state: Document, action: Action, today: date, **_) -> Document:
    update = _coerce(UserInfoUpdate, action.payload or {}, action.type)
    changes = update.model_dump(exclude_unset=True)
    _reject_cleared(changes, _NULLABLE_USER_FIELDS, action.type)

    preset = changes.pop("preset", None)
    if preset is not None:
        if "goal_day_hours" in changes or "goal_night_hours" in changes:
            raise StateError("Use either a goal preset or explicit goal hours, not both")
        changes["goal_day_hours"], changes["goal_night_hours"] = GOAL_PRESET_HOURS[preset]

    if (
        "license_type" in changes
        and state.user.onboarding_complete
        and changes["license_type"] != state.user.license_type
    ):
        raise StateError("License type is fixed after onboarding; reset to change it")

    user = state.user.model_copy(update=changes)
    if user.goal_day_hours + user.goal_night_hours <= 0:
        raise StateError("Total goal hours must be greater than 0")
    # Round-trip through validation so enum/None handling matches a fresh load
    user = UserProfile.model_validate(user.model_dump())
    return state.model_copy(update={"user": user})


def _add_drive(state: Document, action: Action, today: date, **_) -> Document:
    drive = _coerce(Drive, action.payload, action.type)
    if any(d.id == drive.id for d in state.drives):
        raise StateError(f"Drive id {drive.id!r} already exists")
    updated = state.model_copy(update={"drives": [*state.drives, drive]})
    return refresh_derived(updated, today)


def _update_drive(state: Document, action: Action, today: date, **_) -> Document:
    drive = _coerce(Drive, action.payload, action.type)
    if not any(d.id == drive.id for d in state.drives):
        raise StateError(f"No drive with id {drive.id!r}")
    drives = [drive if d.id == drive.id else d for d in state.drives]
    return refresh_derived(state.model_copy(update={"drives": drives}), today)


def _delete_drive(state: Document, action: Action, today: date, **_) -> Document:
    drive_id = action.payload
    if not isinstance(drive_id, str) or not drive_id:
        raise StateError("DELETE_DRIVE expects a drive id")
    drives = [d for d in state.drives if d.id != drive_id]
    if len(drives) == len(state.drives):
        raise StateError(f"No drive with id {drive_id!r}")
    return refresh_derived(state.model_copy(update={"drives": drives}), today)


def _use_freeze_day(
    state: Document, action: Action, today: date, freeze_cap: int = MAX_FREEZE_DAYS_PER_MONTH, **_
) -> Document:
    streaks = state.streaks
    if should_reset_monthly_freeze_counter(streaks.last_freeze_reset, today):
        streaks = streaks.model_copy(update={
            "freeze_days_this_month": 0,
            "last_freeze_reset": today,
        })

    if not can_use_freeze_day(streaks.freeze_days_this_month, freeze_cap):
        raise FreezeCapReachedError(
            f"All {freeze_cap} freeze days for this month have been used"
        )

    streaks = streaks.model_copy(update={
        "freeze_days_used": streaks.freeze_days_used + 1,
        "freeze_days_this_month": streaks.freeze_days_this_month + 1,
    })
    return state.model_copy(update={"streaks": streaks})


def _update_settings(state: Document, action: Action, today: date, **_) -> Document:
    update = _coerce(SettingsUpdate, action.payload or {}, action.type)
    changes = update.model_dump(exclude_unset=True)
    _reject_cleared(changes, _NULLABLE_SETTINGS_FIELDS, action.type)
    settings = state.settings.model_copy(update=changes)
    return state.model_copy(update={"settings": settings})


def _complete_onboarding(state: Document, action: Action, today: date, **_) -> Document:
    user = state.user.model_copy(update={"onboarding_complete": True})
    return state.model_copy(update={"user": user})


def _reset(state: Document, action: Action, today: date, **_) -> Document:
    return default_document(version=state.version)


_TRANSITIONS: Dict[ActionType, Callable[..., Document]] = {
    ActionType.SET_USER_INFO: _set_user_info,
    ActionType.ADD_DRIVE: _add_drive,
    ActionType.UPDATE_DRIVE: _update_drive,
    ActionType.DELETE_DRIVE: _delete_drive,
    ActionType.USE_FREEZE_DAY: _use_freeze_day,
    ActionType.UPDATE_SETTINGS: _update_settings,
    ActionType.COMPLETE_ONBOARDING: _complete_onboarding,
    ActionType.RESET: _reset,
}


def reduce(
    state: Document,
    action: Action,
    *,
    today: date,
    freeze_cap: int = MAX_FREEZE_DAYS_PER_MONTH,
) -> Document:
    """
    Apply one transition.

    Args:
        state: Current document (not modified).
        action: Transition and payload.
        today: Local calendar date, used for streaks and the monthly freeze reset.
        freeze_cap: Monthly freeze-day allowance.

    Returns:
        The new document.

    Raises:
        StateError: if the action type is unknown or its payload is rejected.
    """
    try:
        action_type = ActionType(action.type)
    except ValueError as exc:
        raise StateError(f"Unknown action {action.type!r}") from exc

    logger.debug("Applying %s", action_type.value)
    transition = _TRANSITIONS[action_type]
    return transition(state, Action(action_type, action.payload), today, freeze_cap=freeze_cap)
