"""Debounced background saving of session snapshots."""

from __future__ import annotations

import asyncio
import logging

from quiz_runner.constants.quiz_constants import AUTOSAVE_DEBOUNCE_SECONDS
from quiz_runner.core.errors import StorageError
from quiz_runner.core.services.session_store import FileSessionStore
from quiz_runner.core.services.snapshot import PersistedSnapshot

logger = logging.getLogger(__name__)


class AutoSaveScheduler:
    """Coalesces bursts of changes into one save per quiet period.

    At most one save is pending per session id; scheduling again cancels the
    pending one and starts the delay over. Must be used from a running
    event loop.
    """

    def __init__(self, store: FileSessionStore, delay: float = AUTOSAVE_DEBOUNCE_SECONDS) -> None:
        self._store = store
        self._delay = delay
        self._pending: dict[str, asyncio.Task[None]] = {}

    def schedule(self, snapshot: PersistedSnapshot) -> None:
        self.cancel(snapshot.session_id)
        task = asyncio.get_running_loop().create_task(self._save_later(snapshot))
        self._pending[snapshot.session_id] = task

    def cancel(self, session_id: str | None = None) -> None:
        """Drop the pending save for ``session_id``, or every pending save."""

        session_ids = [session_id] if session_id is not None else list(self._pending)
        for key in session_ids:
            task = self._pending.pop(key, None)
            if task is not None and not task.done():
                logger.debug("Dropped pending auto-save of session %s", key)
                task.cancel()

    def has_pending(self, session_id: str) -> bool:
        return session_id in self._pending

    async def _save_later(self, snapshot: PersistedSnapshot) -> None:
        try:
            await asyncio.sleep(self._delay)
            await self._store.save(snapshot)
        except StorageError as exc:
            logger.warning("Auto-save of session %s failed: %s", snapshot.session_id, exc)
        else:
            logger.debug("Auto-saved session %s", snapshot.session_id)
        finally:
            if self._pending.get(snapshot.session_id) is asyncio.current_task():
                del self._pending[snapshot.session_id]
