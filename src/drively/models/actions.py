"""Transition names and typed payloads accepted by the state reducer."""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from drively.analysis.times import is_valid_time
from drively.models.document import LicenseType, TemperatureUnit


class ActionType(str, Enum):
    SET_USER_INFO = "SET_USER_INFO"
    ADD_DRIVE = "ADD_DRIVE"
    UPDATE_DRIVE = "UPDATE_DRIVE"
    DELETE_DRIVE = "DELETE_DRIVE"
    USE_FREEZE_DAY = "USE_FREEZE_DAY"
    UPDATE_SETTINGS = "UPDATE_SETTINGS"
    COMPLETE_ONBOARDING = "COMPLETE_ONBOARDING"
    RESET = "RESET"


@dataclass(frozen=True)
class Action:
    """
    One transition request.

    payload by type:
      SET_USER_INFO  : UserInfoUpdate (or a dict of its fields)
      ADD_DRIVE      : Drive
      UPDATE_DRIVE   : Drive (matched by id, replaced wholesale)
      DELETE_DRIVE   : drive id (str)
      UPDATE_SETTINGS: SettingsUpdate (or a dict of its fields)
      others         : None
    """

    type: ActionType
    payload: Any = None


class GoalPreset(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"


# (day hours, night hours) per preset
GOAL_PRESET_HOURS = {
    GoalPreset.BASIC: (25, 0),
    GoalPreset.STANDARD: (40, 10),
    GoalPreset.COMPREHENSIVE: (50, 10),
}


class UserInfoUpdate(BaseModel):
    """
    Partial profile update. Derived hour totals are not accepted here
    (extra="forbid"); they only ever come from the drive log. A preset sets
    both goals at once and cannot be combined with explicit goal hours.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    license_type: Optional[LicenseType] = Field(default=None, alias="licenseType")
    license_date: Optional[date] = Field(default=None, alias="licenseDate")
    goal_day_hours: Optional[float] = Field(default=None, ge=0, alias="goalDayHours")
    goal_night_hours: Optional[float] = Field(default=None, ge=0, alias="goalNightHours")
    preset: Optional[GoalPreset] = None  # fills both goals; exclusive with them


class SettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    night_time_start: Optional[str] = Field(default=None, alias="nightTimeStart")
    night_time_end: Optional[str] = Field(default=None, alias="nightTimeEnd")
    backup_reminder: Optional[bool] = Field(default=None, alias="backupReminder")
    last_backup_date: Optional[date] = Field(default=None, alias="lastBackupDate")
    temperature_unit: Optional[TemperatureUnit] = Field(default=None, alias="temperatureUnit")

    @field_validator("night_time_start", "night_time_end")
    @classmethod
    def check_times(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_time(value):
            raise ValueError(f"invalid time {value!r}; expected HH:MM")
        return value
