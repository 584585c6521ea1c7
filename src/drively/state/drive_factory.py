"""
Build a Drive record from what the logging flow captured.

Night classification is decided here, once, from the night window in force
at creation time. Later settings changes never reclassify saved drives.
"""
from typing import Any, Iterable, Optional

from drively.analysis.times import calculate_duration, is_night_time, parse_date, time_to_minutes
from drively.clock import Clock
from drively.errors import StateError
from drively.models.document import AppSettings, Drive, LicenseType

MIN_SUPERVISOR_AGE = 21
MIN_SUPERVISOR_NAME_LENGTH = 2


def new_drive_id(clock: Clock, existing_ids: Iterable[str] = ()) -> str:
    """Epoch milliseconds as a string, bumped until unused."""
    taken = set(existing_ids)
    candidate = int(clock.now().timestamp() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def check_supervisor(
    name: Optional[str],
    age: Optional[int],
    license_type: Optional[LicenseType] = None,
    required: bool = False,
) -> Optional[str]:
    """
    Validate the supervising adult and return the trimmed name.

    Learner-permit drives always need a supervisor; other licenses only when
    required is set. Whenever a name or age is given it must be plausible.

    Raises:
        StateError: missing, too-young or too-short supervisor details.
    """
    name = (name or "").strip() or None
    if (license_type == LicenseType.LEARNER or required) and (name is None or age is None):
        raise StateError("Supervisor name and age are required for this drive")
    if age is not None and age < MIN_SUPERVISOR_AGE:
        raise StateError(f"Supervising adult must be at least {MIN_SUPERVISOR_AGE} years old")
    if name is not None and len(name) < MIN_SUPERVISOR_NAME_LENGTH:
        raise StateError("Supervisor name is too short")
    return name


def build_drive(
    clock: Clock,
    settings: AppSettings,
    *,
    date: str,
    start_time: str,
    end_time: str,
    duration: Optional[int] = None,
    paused_minutes: int = 0,
    existing_ids: Iterable[str] = (),
    license_type: Optional[LicenseType] = None,
    require_supervisor: bool = False,
    supervisor_name: Optional[str] = None,
    supervisor_age: Optional[int] = None,
    **optional: Any,
) -> Drive:
    """
    Create a new Drive.

    Args:
        clock: Source for the creation-time id.
        settings: Current settings; supplies the night window.
        date: "YYYY-MM-DD" day of the drive.
        start_time: "HH:MM" start.
        end_time: "HH:MM" end.
        duration: Driving minutes as timed by the caller; must be at least 1.
            When omitted it is the start→end span minus paused_minutes,
            floored at 1.
        paused_minutes: Minutes spent paused, stored for reference.
        existing_ids: Ids already in the log, to keep the new id unique.
        license_type: The learner's license; learner permits need a supervisor.
        require_supervisor: Demand supervisor details regardless of license.
        supervisor_name: Supervising adult's name (trimmed).
        supervisor_age: Supervising adult's age.
        **optional: weather, skills, destination, destination_type, and any
            extra keys to keep.

    Raises:
        ParseError: if date or either time is malformed.
        StateError: if duration or paused_minutes is out of range, or the
            supervisor details are missing or invalid.
    """
    drive_date = parse_date(date)
    time_to_minutes(start_time)
    time_to_minutes(end_time)

    if paused_minutes < 0:
        raise StateError("Paused minutes cannot be negative")
    if duration is None:
        duration = max(1, calculate_duration(start_time, end_time) - paused_minutes)
    elif duration < 1:
        raise StateError(f"Duration must be at least 1 minute, got {duration}")

    name = check_supervisor(supervisor_name, supervisor_age, license_type, require_supervisor)

    is_night = is_night_time(
        start_time, settings.night_time_start, settings.night_time_end
    ) or is_night_time(end_time, settings.night_time_start, settings.night_time_end)

    return Drive(
        id=new_drive_id(clock, existing_ids),
        date=drive_date,
        start_time=start_time,
        end_time=end_time,
        duration=int(duration),
        is_night_drive=is_night,
        paused_time=paused_minutes,
        supervisor_name=name,
        supervisor_age=supervisor_age,
        **optional,
    )
