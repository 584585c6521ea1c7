"""Export routes: full JSON backup and a CSV table of drives. Read-only."""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from drively.analysis.times import format_date_for_storage
from drively.api.deps import get_coordinator
from drively.state.coordinator import StateCoordinator

router = APIRouter()


def _attachment(coordinator: StateCoordinator, stem: str, suffix: str) -> dict:
    filename = f"{stem}-{format_date_for_storage(coordinator.today())}.{suffix}"
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/export/json")
async def export_json(coordinator: StateCoordinator = Depends(get_coordinator)):
    """
    Full-document backup. Does not touch the document; clients record the
    backup with POST /settings/backup once the file is safely stored.
    """
    body = coordinator.store.export_json(coordinator.document)
    return Response(
        content=body,
        media_type="application/json",
        headers=_attachment(coordinator, "drively-backup", "json"),
    )


@router.get("/export/csv", response_class=PlainTextResponse)
async def export_csv(coordinator: StateCoordinator = Depends(get_coordinator)):
    body = coordinator.store.export_csv(coordinator.document)
    return PlainTextResponse(
        content=body,
        media_type="text/csv",
        headers=_attachment(coordinator, "drively-drives", "csv"),
    )
