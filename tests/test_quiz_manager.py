from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
import json
import random

import pytest

from quiz_runner.core.errors import ParseError, StorageError
from quiz_runner.core.models import QuizSettings, SessionPhase
from quiz_runner.core.quiz_manager import QuizManager
from quiz_runner.core.services.session_store import FileSessionStore

DELAY = 0.05


@pytest.fixture
def store(tmp_path) -> FileSessionStore:
    return FileSessionStore(tmp_path / "sessions")


@pytest.fixture
def manager(store) -> QuizManager:
    return QuizManager(store, autosave_delay=DELAY, rng=random.Random(3))


def test_listeners_see_every_state(manager, sample_json):
    seen = []
    unsubscribe = manager.subscribe(lambda state: seen.append(state.phase))
    manager.load_quiz_from_text(sample_json)
    unsubscribe()
    manager.load_quiz_from_text(sample_json)
    assert seen == [SessionPhase.SETTINGS]


def test_bad_documents_leave_the_state_alone(manager):
    with pytest.raises(ParseError):
        manager.load_quiz_from_text("[1, 2")
    assert manager.state.phase is SessionPhase.SETUP


@pytest.mark.asyncio
async def test_mismatched_answer_is_ignored(manager, sample_json):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    assert manager.answer("Q1", 1) is False
    assert manager.state.answers == {}
    assert manager.answer("Q1", True) is True
    assert manager.state.answers == {"Q1": True}


@pytest.mark.asyncio
async def test_full_attempt_and_export(manager, sample_json, tmp_path):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    assert manager.advance() is False
    manager.answer("Q1", True)
    assert manager.advance() is True
    assert manager.current_question().id == "Q2"
    manager.retreat()
    assert manager.state.current_position == 0

    assert manager.finish(confirm=lambda count: False) is False
    assert manager.finish(confirm=lambda count: True) is True
    assert manager.state.phase is SessionPhase.RESULTS

    summary = manager.get_summary()
    assert (summary.correct, summary.total) == (1, 2)
    assert manager.suggested_export_filename("csv").startswith("sample_results_")

    target = tmp_path / "out.json"
    manager.export_results(target, "json")
    assert len(json.loads(target.read_text(encoding="utf-8"))) == 2


@pytest.mark.asyncio
async def test_progress_is_auto_saved(manager, store, sample_json):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.answer("Q1", False)
    await asyncio.sleep(DELAY * 4)

    saved = await store.load_most_recent()
    assert saved.session_id == manager.state.session_id
    assert saved.answers == {"Q1": False}
    assert saved.completed is False


@pytest.mark.asyncio
async def test_quit_saves_immediately_and_can_be_resumed(manager, store, sample_json):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.answer("Q1", True)
    manager.advance()

    snapshot = await manager.quit()
    assert manager.state.phase is SessionPhase.SETUP
    assert manager.state.last_saved_at == snapshot.timestamp
    assert (await store.load_most_recent()).current_question_id == "Q2"

    offered = await manager.find_resumable_session()
    assert offered.session_id == snapshot.session_id

    manager.resume(offered)
    assert manager.state.phase is SessionPhase.ACTIVE
    assert manager.state.answers == {"Q1": True}
    assert manager.current_question().id == "Q2"


@pytest.mark.asyncio
async def test_finished_attempt_is_not_offered(manager, sample_json):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.answer("Q1", True)
    manager.finish(confirm=lambda count: True)
    await asyncio.sleep(DELAY * 4)
    assert await manager.find_resumable_session() is None


@pytest.mark.asyncio
async def test_stale_attempt_is_not_offered(manager, tmp_path, sample_json):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    snapshot = await manager.quit()
    stale = snapshot.model_copy(
        update={"timestamp": datetime.now(timezone.utc) - timedelta(days=8)}
    )
    (tmp_path / "sessions" / f"{stale.session_id}.json").write_text(stale.to_json(), encoding="utf-8")
    assert await manager.find_resumable_session() is None
    assert list((tmp_path / "sessions").glob("*.json")) == []


@pytest.mark.asyncio
async def test_discard_removes_the_saved_attempt(manager, sample_json):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    snapshot = await manager.quit()
    await manager.discard_session(snapshot.session_id)
    assert await manager.find_resumable_session() is None


@pytest.mark.asyncio
async def test_restart_discards_the_finished_attempt(manager, store, sample_json):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.answer("Q1", True)
    manager.finish(confirm=lambda count: True)
    await asyncio.sleep(DELAY * 4)
    assert await store.load_most_recent() is not None

    await manager.restart()
    assert manager.state.phase is SessionPhase.SETUP
    assert await store.load_most_recent() is None


@pytest.mark.asyncio
async def test_start_over_reloads_the_same_quiz(manager, sample_json):
    document = manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.finish(confirm=lambda count: True)
    first_session = manager.state.session_id

    await manager.start_over()
    assert manager.state.phase is SessionPhase.SETTINGS
    assert manager.state.document == document
    assert manager.state.session_id != first_session


class FailingStore(FileSessionStore):
    async def save(self, snapshot):
        raise StorageError("read-only")

    async def load_most_recent(self):
        raise StorageError("read-only")


@pytest.mark.asyncio
async def test_storage_failures_do_not_interrupt_the_quiz(tmp_path, sample_json, caplog):
    manager = QuizManager(FailingStore(tmp_path), autosave_delay=DELAY)
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.answer("Q1", True)
    await asyncio.sleep(DELAY * 4)

    snapshot = await manager.quit()
    assert manager.state.phase is SessionPhase.SETUP
    assert "read-only" in caplog.text

    # The in-memory copy is still offered while the store is failing.
    offered = await manager.find_resumable_session()
    assert offered.session_id == snapshot.session_id


@pytest.mark.asyncio
async def test_finished_attempt_does_not_hide_an_older_unfinished_one(manager, store, tmp_path, sample_json):
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.answer("Q1", True)
    unfinished = await manager.quit()

    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.answer("Q1", True)
    manager.finish(confirm=lambda count: True)
    finished_id = manager.state.session_id
    await asyncio.sleep(DELAY * 4)
    assert (await store.load_most_recent()).session_id == finished_id

    reopened = QuizManager(store, autosave_delay=DELAY)
    offered = await reopened.find_resumable_session()
    assert offered.session_id == unfinished.session_id
    assert offered.answers == {"Q1": True}
    saved = sorted(path.stem for path in (tmp_path / "sessions").glob("*.json"))
    assert saved == [unfinished.session_id]


@pytest.mark.asyncio
async def test_quit_snapshot_wins_over_a_slow_earlier_save(slow_store, tmp_path, sample_json):
    manager = QuizManager(slow_store, autosave_delay=0)
    manager.load_quiz_from_text(sample_json)
    manager.start_quiz(QuizSettings())
    manager.answer("Q1", True)
    # Let the auto-save for the first answer reach the slow write.
    await asyncio.sleep(0.05)
    manager.answer("Q2", 1)
    manager.advance()

    await manager.quit()
    saved = await slow_store.load_most_recent()
    assert saved.answers == {"Q1": True, "Q2": 1}
    assert saved.current_question_id == "Q2"
    assert list((tmp_path / "slow").glob("*.tmp")) == []
