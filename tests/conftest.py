"""Shared test fixtures."""
from datetime import datetime

import pytest

from drively.clock import FixedClock
from drively.state.coordinator import StateCoordinator
from drively.storage.files import LocalFileStorage
from drively.storage.store import DocumentStore


@pytest.fixture(name="clock")
def clock_fixture() -> FixedClock:
    """Frozen at noon on 2024-06-15 so date arithmetic never straddles midnight."""
    return FixedClock(datetime(2024, 6, 15, 12, 0))


@pytest.fixture(name="files")
def files_fixture(tmp_path) -> LocalFileStorage:
    """Local storage rooted in a fresh temp directory (not yet created)."""
    return LocalFileStorage(tmp_path / "drively")


@pytest.fixture(name="store")
def store_fixture(files) -> DocumentStore:
    return DocumentStore(files)


@pytest.fixture(name="coordinator")
def coordinator_fixture(store, clock) -> StateCoordinator:
    """An initialized coordinator on a first-run store."""
    coordinator = StateCoordinator(store, clock=clock, app_version="1.0.1")
    coordinator.initialize()
    return coordinator
