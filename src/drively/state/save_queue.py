"""
Single-flight, last-write-wins save queue.

Transitions update memory first and then call submit(); persistence
catches up in the background. Only one save runs at a time, so the
store's copy-to-backup-then-overwrite sequence never interleaves with
itself. A document submitted while a save is in flight replaces any
document still waiting. The queued state is always the newest one, so
every superseded state is covered by a later save.

Without a running event loop (CLI, plain scripts) submit() saves inline.
"""
import asyncio
import logging
from typing import Callable, Optional

from drively.models.document import Document

logger = logging.getLogger(__name__)


class SaveQueue:
    def __init__(self, save: Callable[[Document], bool]):
        """
        Args:
            save: Blocking save function returning True/False; it must not
                raise (DocumentStore.save satisfies this). Runs in a worker
                thread when an event loop is available.
        """
        self._save = save
        self._pending: Optional[Document] = None
        self._task: Optional[asyncio.Task] = None
        self.saves_attempted = 0
        self.saves_failed = 0
        self.last_result: Optional[bool] = None

    @property
    def idle(self) -> bool:
        return self._pending is None and (self._task is None or self._task.done())

    def submit(self, document: Document) -> None:
        self._pending = document
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._drain_sync()
            return
        if self._task is None or self._task.done():
            self._task = loop.create_task(self._drain())

    async def flush(self) -> None:
        """Wait until every submitted document has been written (or has failed)."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)
        if self._pending is not None:
            # Submitted outside the loop after the last drain finished
            self._drain_sync()

    async def _drain(self) -> None:
        loop = asyncio.get_running_loop()
        while self._pending is not None:
            document, self._pending = self._pending, None
            ok = await loop.run_in_executor(None, self._save, document)
            self._record(ok)

    def _drain_sync(self) -> None:
        while self._pending is not None:
            document, self._pending = self._pending, None
            self._record(self._save(document))

    def _record(self, ok: bool) -> None:
        self.saves_attempted += 1
        self.last_result = ok
        if not ok:
            self.saves_failed += 1
            logger.warning(
                "Save failed (%d of %d); continuing with in-memory state",
                self.saves_failed,
                self.saves_attempted,
            )
