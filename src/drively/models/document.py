"""
Typed schema for the persisted document: user profile, drives, streaks, settings.

Field names are snake_case in Python and camelCase on disk (via aliases), so
files written by earlier app versions load unchanged. Loading is a typed
parse that fails closed; DocumentStore turns the failure into the backup
fallback chain.
"""
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from drively.analysis.times import is_valid_time

DEFAULT_VERSION = "1.0.1"


class LicenseType(str, Enum):
    LEARNER = "learners"
    RESTRICTED = "restricted"
    UNRESTRICTED = "unrestricted"


class TemperatureUnit(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


def _check_clock_time(value: str) -> str:
    if not is_valid_time(value):
        raise ValueError(f"invalid time {value!r}; expected HH:MM")
    return value


class Drive(BaseModel):
    """
    One logged driving session. Replaced wholesale on update, never patched.

    duration is authoritative: it excludes paused time and is not re-derived
    from start_time/end_time. Unknown keys (weatherData, location, ...) are
    kept as extras so they survive a load/save cycle.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(min_length=1)
    date: date
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    duration: int = Field(ge=1)  # minutes
    is_night_drive: bool = Field(alias="isNightDrive")

    # Free-form, no invariants
    weather: Optional[str] = None
    skills: Optional[str] = None  # comma-joined skill tags
    supervisor_name: Optional[str] = Field(default=None, alias="supervisorName")
    supervisor_age: Optional[int] = Field(default=None, alias="supervisorAge")
    destination: Optional[str] = None
    destination_type: Optional[str] = Field(default=None, alias="destinationType")
    paused_time: Optional[int] = Field(default=None, ge=0, alias="pausedTime")  # minutes

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value: str) -> str:
        return _check_clock_time(value)


class UserProfile(BaseModel):
    """Singleton profile. completed_* hours are derived from the drive log."""

    model_config = ConfigDict(populate_by_name=True)

    license_type: Optional[LicenseType] = Field(default=None, alias="licenseType")
    license_date: Optional[date] = Field(default=None, alias="licenseDate")
    goal_day_hours: float = Field(default=50, ge=0, alias="goalDayHours")
    goal_night_hours: float = Field(default=10, ge=0, alias="goalNightHours")
    completed_day_hours: float = Field(default=0, ge=0, alias="completedDayHours")
    completed_night_hours: float = Field(default=0, ge=0, alias="completedNightHours")
    onboarding_complete: bool = Field(default=False, alias="onboardingComplete")


class StreakState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current: int = Field(default=0, ge=0)
    longest: int = Field(default=0, ge=0)
    last_drive_date: Optional[date] = Field(default=None, alias="lastDriveDate")
    freeze_days_used: int = Field(default=0, ge=0, alias="freezeDaysUsed")
    freeze_days_this_month: int = Field(default=0, ge=0, alias="freezeDaysThisMonth")
    last_freeze_reset: Optional[date] = Field(default=None, alias="lastFreezeReset")


class AppSettings(BaseModel):
    """User-editable settings. Night window changes never reclassify past drives."""

    model_config = ConfigDict(populate_by_name=True)

    night_time_start: str = Field(default="18:00", alias="nightTimeStart")
    night_time_end: str = Field(default="06:00", alias="nightTimeEnd")
    backup_reminder: bool = Field(default=True, alias="backupReminder")
    last_backup_date: Optional[date] = Field(default=None, alias="lastBackupDate")
    temperature_unit: TemperatureUnit = Field(default=TemperatureUnit.METRIC, alias="temperatureUnit")

    @field_validator("night_time_start", "night_time_end")
    @classmethod
    def check_times(cls, value: str) -> str:
        return _check_clock_time(value)


class Document(BaseModel):
    """The single persisted aggregate. user/drives/streaks/settings are required."""

    model_config = ConfigDict(populate_by_name=True)

    user: UserProfile
    drives: List[Drive]
    streaks: StreakState
    settings: AppSettings
    version: str = DEFAULT_VERSION

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


def default_document(version: str = DEFAULT_VERSION) -> Document:
    """Fresh document for a first run or a full reset."""
    return Document(
        user=UserProfile(),
        drives=[],
        streaks=StreakState(),
        settings=AppSettings(),
        version=version,
    )
