from __future__ import annotations

from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
import random

import pytest

from quiz_runner.core.errors import AnswerTypeMismatchError, SessionPhaseError
from quiz_runner.core.models import (
    MCQuestion,
    QuizDocument,
    QuizMetadata,
    QuizSettings,
    SessionPhase,
    TFQuestion,
)
from quiz_runner.core.services import game_session

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _answer_all(state):
    for question_id in state.active_order:
        question = state.document.get_question(question_id)
        state = game_session.record_answer(state, question_id, question.answer)
    return state


def test_phases_run_in_order(sample_document):
    state = game_session.initial_state()
    assert state.phase is SessionPhase.SETUP

    state = game_session.load_document(state, sample_document)
    assert state.phase is SessionPhase.SETTINGS
    assert state.session_id
    assert state.active_order == ()

    state = game_session.start_quiz(state, QuizSettings())
    assert state.phase is SessionPhase.ACTIVE
    assert state.active_order == ("Q1", "Q2")
    assert state.current_position == 0

    state = game_session.finish(_answer_all(state))
    assert state.phase is SessionPhase.RESULTS

    state = game_session.restart(state)
    assert state == game_session.initial_state()


def test_quiz_cannot_start_without_settings(sample_document):
    with pytest.raises(SessionPhaseError):
        game_session.start_quiz(game_session.initial_state(), QuizSettings())


def test_answers_are_rejected_outside_the_active_phase(sample_document):
    state = game_session.load_document(game_session.initial_state(), sample_document)
    with pytest.raises(SessionPhaseError):
        game_session.record_answer(state, "Q1", True)


def test_loading_a_document_starts_a_new_attempt(active_state, sample_document):
    state = game_session.record_answer(active_state, "q1", 0)
    reloaded = game_session.load_document(state, sample_document)
    assert reloaded.answers == {}
    assert reloaded.session_id != state.session_id


def test_random_order_is_a_permutation(five_question_document, seeded_rng):
    state = game_session.load_document(game_session.initial_state(), five_question_document)
    started = game_session.start_quiz(state, QuizSettings(random_order=True), seeded_rng)
    assert sorted(started.active_order) == five_question_document.question_ids()


def test_first_position_is_roughly_uniform(five_question_document, seeded_rng):
    state = game_session.load_document(game_session.initial_state(), five_question_document)
    settings = QuizSettings(random_order=True)
    trials = 1000
    first = Counter(
        game_session.start_quiz(state, settings, seeded_rng).active_order[0] for _ in range(trials)
    )
    assert set(first) == set(five_question_document.question_ids())
    expected = trials / 5
    for count in first.values():
        assert abs(count - expected) < expected * 0.25


def test_shuffle_starts_from_the_document_order(five_question_document):
    state = game_session.load_document(game_session.initial_state(), five_question_document)
    state = replace(state, active_order=("q5", "q4", "q3", "q2", "q1"))
    first = game_session.start_quiz(state, QuizSettings(random_order=True), random.Random(7))
    second = game_session.start_quiz(state, QuizSettings(random_order=True), random.Random(7))
    assert first.active_order == second.active_order
    unshuffled = game_session.start_quiz(state, QuizSettings(random_order=False))
    assert unshuffled.active_order == ("q1", "q2", "q3", "q4", "q5")


def test_answers_are_overwritten(active_state):
    state = game_session.record_answer(active_state, "q1", 0)
    state = game_session.record_answer(state, "q1", 2)
    assert state.answers == {"q1": 2}
    assert active_state.answers == {}


def test_mismatched_answers_are_rejected(sample_document):
    state = game_session.start_quiz(
        game_session.load_document(game_session.initial_state(), sample_document), QuizSettings()
    )
    for question_id, value in [("Q1", 1), ("Q2", True), ("Q2", 2), ("Q2", -1), ("Q2", "B")]:
        with pytest.raises(AnswerTypeMismatchError):
            game_session.record_answer(state, question_id, value)


def test_unknown_question_id_is_rejected(active_state):
    with pytest.raises(KeyError):
        game_session.record_answer(active_state, "missing", 0)


def test_advance_is_a_no_op_while_unanswered(active_state):
    assert game_session.advance(active_state) is active_state
    assert active_state.current_position == 0
    assert active_state.phase is SessionPhase.ACTIVE


def test_advance_and_retreat_stay_in_range(active_state):
    state = _answer_all(active_state)
    for _ in range(10):
        state = game_session.advance(state)
    assert state.current_position == 4
    for _ in range(10):
        state = game_session.retreat(state)
    assert state.current_position == 0


def test_finish_asks_for_confirmation_when_unanswered(active_state):
    state = game_session.record_answer(active_state, "q1", 0)
    asked = []

    def decline(count):
        asked.append(count)
        return False

    assert game_session.finish(state, decline) is state
    assert game_session.finish(state) is state
    assert asked == [4]
    finished = game_session.finish(state, lambda count: True)
    assert finished.phase is SessionPhase.RESULTS


def test_quit_returns_to_setup_and_keeps_progress(active_state):
    state = game_session.record_answer(active_state, "q1", 1)
    quit_state = game_session.quit_session(state)
    assert quit_state.phase is SessionPhase.SETUP
    assert quit_state.session_id == state.session_id
    assert quit_state.answers == {"q1": 1}


def test_progress_counters(active_state):
    state = game_session.record_answer(active_state, "q2", 0)
    state = game_session.record_answer(state, "q4", 1)
    assert game_session.answered_count(state) == 2
    assert game_session.unanswered_count(state) == 3
    assert game_session.progress_percent(state) == 40
    assert not game_session.is_completed(state)
    assert game_session.is_completed(_answer_all(state))


def test_snapshot_mirrors_the_state(active_state):
    state = game_session.record_answer(active_state, "q1", 0)
    state = game_session.advance(state)
    snapshot = game_session.build_snapshot(state, NOW)
    assert snapshot.session_id == state.session_id
    assert snapshot.active_order == ["q1", "q2", "q3", "q4", "q5"]
    assert snapshot.answers == {"q1": 0}
    assert snapshot.current_question_id == "q2"
    assert snapshot.current_position == 1
    assert snapshot.completed is False
    assert snapshot.timestamp == NOW
    assert snapshot.document[0] == {"metadata": {"name": "Five"}}


def test_results_phase_snapshot_is_completed(active_state):
    state = game_session.finish(active_state, lambda count: True)
    assert game_session.build_snapshot(state, NOW).completed is True


def test_resume_restores_the_session(five_question_document, seeded_rng):
    state = game_session.load_document(game_session.initial_state(), five_question_document)
    state = game_session.start_quiz(state, QuizSettings(random_order=True), seeded_rng)
    state = game_session.record_answer(state, state.active_order[0], 1)
    state = game_session.advance(state)

    resumed = game_session.resume(game_session.build_snapshot(state, NOW))
    assert resumed.phase is SessionPhase.ACTIVE
    assert resumed.document == five_question_document
    assert resumed.active_order == state.active_order
    assert resumed.answers == state.answers
    assert resumed.current_position == 1
    assert resumed.settings.random_order is True
    assert resumed.last_saved_at == NOW


def test_resume_is_stable_when_questions_are_removed(active_state):
    state = replace(active_state, active_order=("q3", "q1", "q5", "q2", "q4"))
    state = game_session.record_answer(state, "q2", 1)
    snapshot = game_session.build_snapshot(state, NOW)
    shrunk = QuizDocument(
        metadata=state.document.metadata,
        questions=tuple(q for q in state.document.questions if q.id not in ("q1", "q4")),
    )

    resumed = game_session.resume(snapshot, shrunk)
    assert resumed.active_order == ("q3", "q5", "q2")
    assert resumed.answers == {"q2": 1}


def test_resume_appends_new_questions(active_state):
    snapshot = game_session.build_snapshot(replace(active_state, active_order=("q2", "q1")), NOW)
    grown = QuizDocument(
        metadata=QuizMetadata(name="Grown"),
        questions=(
            TFQuestion(id="new", prompt="p", answer=True),
            *active_state.document.questions[:2],
        ),
    )
    assert game_session.resume(snapshot, grown).active_order == ("q2", "q1", "new")


def test_resume_falls_back_to_the_stored_questions(active_state):
    snapshot = game_session.build_snapshot(active_state, NOW).model_copy(
        update={"active_order": ["gone"], "current_question_id": None, "current_position": 9}
    )
    resumed = game_session.resume(snapshot)
    assert resumed.active_order == ("q1", "q2", "q3", "q4", "q5")
    assert resumed.current_position == 4


def test_resume_position_follows_the_current_question(active_state):
    state = _answer_all(active_state)
    state = game_session.advance(game_session.advance(state))
    snapshot = game_session.build_snapshot(state, NOW)
    assert snapshot.current_question_id == "q3"
    reordered = QuizDocument(
        metadata=state.document.metadata,
        questions=tuple(q for q in state.document.questions if q.id != "q1"),
    )
    resumed = game_session.resume(snapshot, reordered)
    assert resumed.active_order[resumed.current_position] == "q3"


def test_resume_drops_answers_that_no_longer_fit(active_state):
    state = game_session.record_answer(active_state, "q1", 2)
    snapshot = game_session.build_snapshot(state, NOW)
    changed = QuizDocument(
        metadata=state.document.metadata,
        questions=(
            MCQuestion(id="q1", prompt="now shorter", options=("a", "b"), answer=0),
            *state.document.questions[1:],
        ),
    )
    assert game_session.resume(snapshot, changed).answers == {}


def test_resume_uses_the_stored_copy_when_no_saved_question_survives(active_state):
    state = game_session.record_answer(active_state, "q2", 1)
    snapshot = game_session.build_snapshot(state, NOW)
    unrelated = QuizDocument(
        metadata=QuizMetadata(name="Other"),
        questions=(TFQuestion(id="x", prompt="p", answer=True),),
    )
    resumed = game_session.resume(snapshot, unrelated)
    assert resumed.document == active_state.document
    assert resumed.active_order == active_state.active_order
    assert resumed.answers == {"q2": 1}
