"""Business logic for the quiz session shared with the UI."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
import logging
from pathlib import Path
import random
from typing import Callable

from quiz_runner.constants.quiz_constants import AUTOSAVE_DEBOUNCE_SECONDS
from quiz_runner.core.errors import AnswerTypeMismatchError, StorageError
from quiz_runner.core.models import (
    AnswerValue,
    Question,
    QuizDocument,
    QuizSettings,
    SessionPhase,
    SessionState,
)
from quiz_runner.core.quiz_importer import load_quiz_from_file, load_quiz_from_text
from quiz_runner.core.results_exporter import export_filename, save_results_to_file
from quiz_runner.core.services import game_session
from quiz_runner.core.services.autosave import AutoSaveScheduler
from quiz_runner.core.services.scoreboard import QuestionResult, ScoreSummary, score, summarize
from quiz_runner.core.services.session_store import FileSessionStore, is_resumable
from quiz_runner.core.services.snapshot import PersistedSnapshot

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]


class QuizManager:
    """Facade over the session transitions, the store and the auto-saver.

    Holds the one live :class:`SessionState`; every change is pushed to the
    subscribed listeners and, while a quiz is running, queued for a
    debounced save.
    """

    def __init__(
        self,
        store: FileSessionStore,
        autosave_delay: float = AUTOSAVE_DEBOUNCE_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._autosave = AutoSaveScheduler(store, autosave_delay)
        self._rng = rng
        self._state = game_session.initial_state()
        # Last quit snapshot; offered for resume when the store returns nothing.
        self._suspended: PersistedSnapshot | None = None
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # --- Loading ---

    def load_quiz_from_text(self, text: str) -> QuizDocument:
        document = load_quiz_from_text(text)
        self._replace_document(document)
        return document

    def load_quiz_from_file(self, file_path: Path) -> QuizDocument:
        document = load_quiz_from_file(file_path)
        self._replace_document(document)
        return document

    def _replace_document(self, document: QuizDocument) -> None:
        self._autosave.cancel()
        self._suspended = None
        self._set_state(game_session.load_document(self._state, document))

    # --- Session flow ---

    def start_quiz(self, settings: QuizSettings) -> None:
        self._set_state(game_session.start_quiz(self._state, settings, self._rng))
        logger.info(
            "Started session %s with %d question(s)%s",
            self._state.session_id,
            len(self._state.active_order),
            " in random order" if settings.random_order else "",
        )
        self._schedule_autosave()

    def current_question(self) -> Question | None:
        return game_session.current_question(self._state)

    def answer(self, question_id: str, value: AnswerValue) -> bool:
        """Record an answer; mismatched values are ignored and ``False`` returned."""

        try:
            new_state = game_session.record_answer(self._state, question_id, value)
        except AnswerTypeMismatchError as exc:
            logger.debug("Ignoring answer: %s", exc)
            return False
        self._set_state(new_state)
        self._schedule_autosave()
        return True

    def advance(self) -> bool:
        new_state = game_session.advance(self._state)
        if new_state is self._state:
            return False
        self._set_state(new_state)
        self._schedule_autosave()
        return True

    def retreat(self) -> None:
        self._set_state(game_session.retreat(self._state))
        self._schedule_autosave()

    def finish(self, confirm: Callable[[int], bool] | None = None) -> bool:
        new_state = game_session.finish(self._state, confirm)
        if new_state is self._state:
            return False
        self._set_state(new_state)
        self._schedule_autosave()
        return True

    async def quit(self) -> PersistedSnapshot:
        """Save the running quiz right away and return to the setup page."""

        quit_state = game_session.quit_session(self._state)
        self._autosave.cancel(quit_state.session_id)
        snapshot = await self._save_now(
            game_session.build_snapshot(quit_state, datetime.now(timezone.utc))
        )
        self._suspended = snapshot
        self._set_state(replace(quit_state, last_saved_at=snapshot.timestamp))
        logger.info("Quit session %s", snapshot.session_id)
        return snapshot

    async def restart(self) -> None:
        """Throw away a finished attempt, including its stored record."""

        session_id = self._state.session_id
        self._set_state(game_session.restart(self._state))
        if session_id is not None:
            await self.discard_session(session_id)

    async def start_over(self) -> None:
        """Restart, then load the same quiz again for a fresh attempt."""

        document = self._state.document
        await self.restart()
        if document is not None:
            self._replace_document(document)

    # --- Resume ---

    async def find_resumable_session(self) -> PersistedSnapshot | None:
        """Most recent unfinished session, removing finished or stale records on the way."""

        try:
            snapshot = await self._load_resumable()
        except StorageError as exc:
            logger.warning("Could not look up saved sessions: %s", exc)
            snapshot = None
        if snapshot is None:
            snapshot = self._suspended
        if snapshot is None or not is_resumable(snapshot):
            return None
        return snapshot

    async def _load_resumable(self) -> PersistedSnapshot | None:
        evicted: set[str] = set()
        snapshot = await self._store.load_most_recent()
        while snapshot is not None and not is_resumable(snapshot):
            if snapshot.session_id in evicted:
                # Record file name and session id disagree; it cannot be removed by id.
                return None
            logger.info("Removing saved session %s; it is finished or too old", snapshot.session_id)
            await self._store.delete(snapshot.session_id)
            evicted.add(snapshot.session_id)
            snapshot = await self._store.load_most_recent()
        return snapshot

    def resume(self, snapshot: PersistedSnapshot, document: QuizDocument | None = None) -> None:
        state = game_session.resume(snapshot, document)
        self._autosave.cancel()
        self._suspended = None
        self._set_state(state)
        logger.info(
            "Resumed session %s at question %d of %d",
            state.session_id,
            state.current_position + 1,
            len(state.active_order),
        )

    async def discard_session(self, session_id: str) -> None:
        self._autosave.cancel(session_id)
        if self._suspended is not None and self._suspended.session_id == session_id:
            self._suspended = None
        try:
            await self._store.delete(session_id)
        except StorageError as exc:
            logger.warning("Could not delete saved session %s: %s", session_id, exc)

    # --- Results ---

    def get_results(self) -> list[QuestionResult]:
        if self._state.document is None:
            return []
        return score(self._state.document, self._state.answers)

    def get_summary(self) -> ScoreSummary:
        return summarize(self.get_results())

    def suggested_export_filename(self, fmt: str) -> str:
        name = self._state.document.metadata.name if self._state.document else "quiz"
        return export_filename(name, fmt)

    def export_results(self, file_path: Path, fmt: str) -> None:
        save_results_to_file(file_path, self.get_results(), fmt)
        logger.info("Exported %s results to %s", fmt.upper(), file_path)

    # --- Internals ---

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _schedule_autosave(self) -> None:
        if self._state.phase not in (SessionPhase.ACTIVE, SessionPhase.RESULTS):
            return
        self._autosave.schedule(
            game_session.build_snapshot(self._state, datetime.now(timezone.utc))
        )

    async def _save_now(self, snapshot: PersistedSnapshot) -> PersistedSnapshot:
        try:
            return await self._store.save(snapshot)
        except StorageError as exc:
            logger.warning("Could not save session %s: %s", snapshot.session_id, exc)
            return snapshot
