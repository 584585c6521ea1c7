"""
StateCoordinator: sole owner of the in-memory document.

Flow for every transition:
  1. reduce(document, action) → new document (StateError → nothing changes)
  2. Replace the in-memory document
  3. Submit the new document to the SaveQueue (best-effort, never blocks)

Memory is authoritative: a failed save is logged and the next successful
save resynchronizes the files. Transitions run synchronously on the caller's
thread; with the async HTTP surface that is the event-loop thread, so no two
transitions ever interleave.
"""
import logging
from datetime import date
from typing import Any, Optional

from drively.analysis.aggregator import refresh_derived
from drively.analysis.streaks import MAX_FREEZE_DAYS_PER_MONTH, should_reset_monthly_freeze_counter
from drively.clock import Clock, SystemClock
from drively.errors import StateError
from drively.models.actions import Action, ActionType
from drively.models.document import Document, Drive
from drively.state.reducer import reduce
from drively.state.save_queue import SaveQueue
from drively.storage.store import DocumentStore

logger = logging.getLogger(__name__)


class StateCoordinator:
    """
    Usage:
        coordinator = StateCoordinator(store, clock=SystemClock())
        coordinator.initialize()
        coordinator.add_drive(drive)
        await coordinator.flush()   # optional: wait for persistence
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Optional[Clock] = None,
        *,
        app_version: Optional[str] = None,
        freeze_cap: int = MAX_FREEZE_DAYS_PER_MONTH,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.app_version = app_version
        self.freeze_cap = freeze_cap
        self.save_queue = SaveQueue(store.save)
        self._document: Optional[Document] = None

    # ─── Lifecycle ────────────────────────────────────────────────────────────

    @property
    def document(self) -> Document:
        if self._document is None:
            raise StateError("Coordinator not initialized; call initialize() first")
        return self._document

    @property
    def initialized(self) -> bool:
        return self._document is not None

    def today(self) -> date:
        return self.clock.now().date()

    def initialize(self) -> Document:
        """
        Load the document, rebuild its derived fields from the drive log and
        apply the monthly freeze reset. Saves when either changed anything.

        Returns:
            The hydrated document.
        """
        loaded = self.store.load()
        today = self.today()
        document = refresh_derived(loaded, today)
        streaks = document.streaks

        if should_reset_monthly_freeze_counter(streaks.last_freeze_reset, today):
            logger.info("Resetting monthly freeze counter (was %d)", streaks.freeze_days_this_month)
            document = document.model_copy(update={
                "streaks": streaks.model_copy(update={
                    "freeze_days_this_month": 0,
                    "last_freeze_reset": today,
                }),
            })

        self._document = document
        if document != loaded:
            self._schedule_save()

        logger.info(
            "Data loaded: %d drives, onboarding_complete=%s",
            len(document.drives),
            document.user.onboarding_complete,
        )
        return self._document

    async def flush(self) -> None:
        await self.save_queue.flush()

    # ─── Dispatch ─────────────────────────────────────────────────────────────

    def dispatch(self, action: Action) -> Document:
        """
        Apply one transition and schedule a save of the result.

        Raises:
            StateError: payload rejected; the document is unchanged.
        """
        current = self.document
        new_document = reduce(current, action, today=self.today(), freeze_cap=self.freeze_cap)
        self._document = new_document
        self._schedule_save()
        return self._document

    def _schedule_save(self) -> None:
        document = self._document
        if self.app_version and document.version != self.app_version:
            document = document.model_copy(update={"version": self.app_version})
            self._document = document
        self.save_queue.submit(document)

    # ─── Convenience transitions ──────────────────────────────────────────────

    def set_user_info(self, **fields: Any) -> Document:
        return self.dispatch(Action(ActionType.SET_USER_INFO, fields))

    def add_drive(self, drive: Drive) -> Document:
        document = self.dispatch(Action(ActionType.ADD_DRIVE, drive))
        logger.info(
            "Drive added id=%s duration=%d night=%s streak=%d",
            drive.id,
            drive.duration,
            drive.is_night_drive,
            document.streaks.current,
        )
        return document

    def update_drive(self, drive: Drive) -> Document:
        document = self.dispatch(Action(ActionType.UPDATE_DRIVE, drive))
        logger.info("Drive updated id=%s duration=%d", drive.id, drive.duration)
        return document

    def delete_drive(self, drive_id: str) -> Document:
        document = self.dispatch(Action(ActionType.DELETE_DRIVE, drive_id))
        logger.info("Drive deleted id=%s remaining=%d", drive_id, len(document.drives))
        return document

    def use_freeze_day(self) -> Document:
        document = self.dispatch(Action(ActionType.USE_FREEZE_DAY))
        logger.info(
            "Freeze day used (%d/%d this month)",
            document.streaks.freeze_days_this_month,
            self.freeze_cap,
        )
        return document

    def update_settings(self, **fields: Any) -> Document:
        return self.dispatch(Action(ActionType.UPDATE_SETTINGS, fields))

    def complete_onboarding(self) -> Document:
        return self.dispatch(Action(ActionType.COMPLETE_ONBOARDING))

    async def reset(self) -> Document:
        """
        Full, user-confirmed reset: wait for in-flight saves, delete both
        files, then persist a fresh default document.
        """
        await self.flush()
        if not self.store.clear():
            logger.warning("Reset continuing although data files could not be deleted")
        document = self.dispatch(Action(ActionType.RESET))
        await self.flush()
        return document
