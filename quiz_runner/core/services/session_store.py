"""Durable, local-only storage for in-progress quiz sessions."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
import os
from pathlib import Path
import re
from typing import Callable
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from quiz_runner.constants.quiz_constants import RESUME_MAX_AGE
from quiz_runner.core.errors import StorageError
from quiz_runner.core.services.snapshot import PersistedSnapshot

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class FileSessionStore:
    """Key-value store with one JSON file per session id.

    Records are kept as given; deciding whether one is too old to resume is
    up to the caller (see :func:`is_resumable`). If the directory cannot be
    created the store runs in unavailable mode, where every operation quietly
    does nothing.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        # Writes and deletes for one session run one at a time, oldest first.
        self._locks: dict[str, asyncio.Lock] = {}
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Session storage unavailable at %s: %s", directory, exc)
            self._available = False
        else:
            self._available = True

    @property
    def is_available(self) -> bool:
        return self._available

    async def save(self, snapshot: PersistedSnapshot) -> PersistedSnapshot:
        """Upsert ``snapshot`` under its session id, stamped with the current time."""

        stamped = snapshot.model_copy(update={"timestamp": datetime.now(timezone.utc)})
        if not self._available:
            return stamped
        # Shielded so a cancelled caller cannot release the lock while the
        # worker thread is still writing.
        await asyncio.shield(self._run_locked(stamped.session_id, self._write, stamped))
        return stamped

    async def load_most_recent(self) -> PersistedSnapshot | None:
        if not self._available:
            return None
        snapshots = await asyncio.to_thread(self._read_all)
        if not snapshots:
            return None
        return max(snapshots, key=lambda snapshot: snapshot.timestamp)

    async def delete(self, session_id: str) -> None:
        if not self._available:
            return
        await asyncio.shield(self._run_locked(session_id, self._remove, session_id))

    async def _run_locked(
        self, session_id: str, operation: Callable[..., None], *args: object
    ) -> None:
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        async with lock:
            await asyncio.to_thread(operation, *args)

    def _path_for(self, session_id: str) -> Path:
        if not _SAFE_ID.match(session_id):
            raise StorageError(f"Invalid session id {session_id!r}")
        return self._directory / f"{session_id}.json"

    def _write(self, snapshot: PersistedSnapshot) -> None:
        path = self._path_for(snapshot.session_id)
        temp_path = path.with_name(f"{path.stem}.{uuid4().hex}.tmp")
        try:
            temp_path.write_text(snapshot.to_json(), encoding="utf-8")
            os.replace(temp_path, path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise StorageError(f"Could not save session {snapshot.session_id}: {exc}") from exc

    def _read_all(self) -> list[PersistedSnapshot]:
        try:
            paths = sorted(self._directory.glob("*.json"))
        except OSError as exc:
            raise StorageError(f"Could not list sessions in {self._directory}: {exc}") from exc
        snapshots: list[PersistedSnapshot] = []
        for path in paths:
            try:
                snapshots.append(PersistedSnapshot.from_json(path.read_bytes()))
            except (OSError, PydanticValidationError) as exc:
                logger.warning("Skipping unreadable session record %s: %s", path.name, exc)
        return snapshots

    def _remove(self, session_id: str) -> None:
        try:
            self._path_for(session_id).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not delete session {session_id}: {exc}") from exc


def is_resumable(snapshot: PersistedSnapshot, now: datetime | None = None) -> bool:
    """Whether ``snapshot`` should be offered on the resume prompt."""

    if snapshot.completed:
        return False
    now = now or datetime.now(timezone.utc)
    timestamp = snapshot.timestamp
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return now - timestamp <= RESUME_MAX_AGE
