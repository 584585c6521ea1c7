"""FastAPI application factory."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from drively.api.routes import drives, export, profile, streaks
from drively.clock import SystemClock
from drively.config import get_settings
from drively.state.coordinator import StateCoordinator
from drively.storage.files import LocalFileStorage
from drively.storage.store import DocumentStore

logger = logging.getLogger(__name__)


def build_coordinator() -> StateCoordinator:
    """Coordinator wired to the on-disk store described by Settings."""
    settings = get_settings()
    store = DocumentStore(
        LocalFileStorage(settings.data_dir),
        main_name=settings.data_file_name,
        backup_name=settings.backup_file_name,
    )
    return StateCoordinator(
        store,
        clock=SystemClock(),
        app_version=settings.app_version,
        freeze_cap=settings.max_freeze_days_per_month,
    )


def create_app(
    coordinator: Optional[StateCoordinator] = None,
    *,
    start_scheduler: bool = True,
) -> FastAPI:
    """Build and return the FastAPI app."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        coord = coordinator or build_coordinator()
        if not coord.initialized:
            coord.initialize()
        app.state.coordinator = coord

        scheduler = None
        if start_scheduler:
            from drively.scheduler.jobs import build_scheduler
            scheduler = build_scheduler(coord)
            scheduler.start()
        yield
        if scheduler is not None:
            scheduler.shutdown()
        await coord.flush()
        logger.info("Pending saves flushed")

    app = FastAPI(
        title="Drively API",
        description="Supervised driving log: drives, goals, streaks",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(drives.router, tags=["drives"])
    app.include_router(profile.router, tags=["profile"])
    app.include_router(streaks.router, tags=["streaks"])
    app.include_router(export.router, tags=["export"])

    return app


# Module-level app instance for uvicorn
app = create_app()
