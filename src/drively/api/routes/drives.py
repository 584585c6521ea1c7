"""Drive log routes: the add/update/delete transitions plus reads."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from drively.api.deps import get_coordinator, state_error_to_http
from drively.errors import ParseError, StateError
from drively.models.document import Document, Drive
from drively.state.coordinator import StateCoordinator
from drively.state.drive_factory import build_drive

router = APIRouter()


class DriveCreate(BaseModel):
    """What the logging flow captured for a finished drive."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    duration: Optional[int] = Field(default=None, ge=1)  # omitted → derived from times
    paused_minutes: int = Field(default=0, ge=0, alias="pausedMinutes")
    weather: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    supervisor_name: Optional[str] = Field(default=None, alias="supervisorName")
    supervisor_age: Optional[int] = Field(default=None, alias="supervisorAge")
    require_supervisor: bool = Field(default=False, alias="requireSupervisor")
    destination: Optional[str] = None
    destination_type: Optional[str] = Field(default=None, alias="destinationType")


class DeleteResponse(BaseModel):
    deleted: str
    remaining: int


@router.get("/document", response_model=Document)
async def get_document(coordinator: StateCoordinator = Depends(get_coordinator)):
    """The full current document."""
    return coordinator.document


@router.get("/drives", response_model=List[Drive])
async def list_drives(coordinator: StateCoordinator = Depends(get_coordinator)):
    """All drives, newest date first."""
    return sorted(
        coordinator.document.drives,
        key=lambda d: (d.date, d.start_time),
        reverse=True,
    )


@router.post("/drives", response_model=Drive, status_code=201)
async def add_drive(
    request: DriveCreate,
    coordinator: StateCoordinator = Depends(get_coordinator),
):
    """Log a finished drive. Night classification uses the current settings."""
    document = coordinator.document
    try:
        drive = build_drive(
            coordinator.clock,
            document.settings,
            date=request.date,
            start_time=request.start_time,
            end_time=request.end_time,
            duration=request.duration,
            paused_minutes=request.paused_minutes,
            existing_ids=[d.id for d in document.drives],
            weather=request.weather,
            skills=", ".join(request.skills) if request.skills else None,
            license_type=document.user.license_type,
            require_supervisor=request.require_supervisor,
            supervisor_name=request.supervisor_name,
            supervisor_age=request.supervisor_age,
            destination=request.destination,
            destination_type=request.destination_type,
        )
        coordinator.add_drive(drive)
    except ParseError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except StateError as exc:
        raise state_error_to_http(exc)
    return drive


@router.put("/drives/{drive_id}", response_model=Drive)
async def update_drive(
    drive_id: str,
    drive: Drive,
    coordinator: StateCoordinator = Depends(get_coordinator),
):
    """Replace a drive wholesale."""
    if drive.id != drive_id:
        raise HTTPException(status_code=400, detail="Drive id in body does not match URL")
    try:
        coordinator.update_drive(drive)
    except StateError as exc:
        raise state_error_to_http(exc)
    return drive


@router.delete("/drives/{drive_id}", response_model=DeleteResponse)
async def delete_drive(
    drive_id: str,
    coordinator: StateCoordinator = Depends(get_coordinator),
):
    try:
        document = coordinator.delete_drive(drive_id)
    except StateError as exc:
        raise state_error_to_http(exc)
    return DeleteResponse(deleted=drive_id, remaining=len(document.drives))
