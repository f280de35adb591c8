"""Pure transitions for a single quiz attempt.

Every function takes a :class:`SessionState` and returns a new one; nothing
is mutated in place. The phases run ``setup -> settings -> active ->
results``, with ``active -> setup`` for quitting and ``results -> setup``
for restarting. Question order is fixed once, on ``settings -> active``.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
import random
from typing import Callable
from uuid import uuid4

from quiz_runner.core.errors import AnswerTypeMismatchError, SessionPhaseError
from quiz_runner.core.models import (
    AnswerValue,
    MCQuestion,
    Question,
    QuizDocument,
    QuizSettings,
    SessionPhase,
    SessionState,
)
from quiz_runner.core.quiz_exporter import document_to_tree
from quiz_runner.core.schema_validator import normalize_document
from quiz_runner.core.services.snapshot import PersistedSnapshot, SettingsRecord


def new_session_id() -> str:
    return uuid4().hex


def initial_state() -> SessionState:
    return SessionState()


def load_document(state: SessionState, document: QuizDocument) -> SessionState:
    """Replace whatever ``state`` held with a fresh attempt at ``document``."""

    return SessionState(
        document=document,
        settings=QuizSettings(),
        phase=SessionPhase.SETTINGS,
        session_id=new_session_id(),
    )


def start_quiz(
    state: SessionState,
    settings: QuizSettings,
    rng: random.Random | None = None,
) -> SessionState:
    """Fix the display order and enter the active phase.

    The order is always derived from the loaded document, never from a
    previous ``active_order``, so a shuffle happens exactly once per attempt.
    """

    _require_phase(state, SessionPhase.SETTINGS, "start the quiz")
    order = state.document.question_ids()
    if settings.random_order:
        # random.shuffle is an unbiased Fisher-Yates shuffle.
        (rng or random.Random()).shuffle(order)
    return replace(
        state,
        settings=settings,
        active_order=tuple(order),
        answers={},
        current_position=0,
        phase=SessionPhase.ACTIVE,
    )


def record_answer(state: SessionState, question_id: str, value: AnswerValue) -> SessionState:
    """Store ``value`` for ``question_id``, overwriting any earlier answer."""

    _require_phase(state, SessionPhase.ACTIVE, "answer a question")
    question = state.document.get_question(question_id)
    if question is None or question_id not in state.active_order:
        raise KeyError(f"Unknown question id {question_id!r}")
    check_answer_type(question, value)
    return replace(state, answers={**state.answers, question_id: value})


def check_answer_type(question: Question, value: object) -> None:
    if isinstance(question, MCQuestion):
        if isinstance(value, bool) or not isinstance(value, int):
            raise AnswerTypeMismatchError(
                f"Question '{question.id}' expects an option index, got {value!r}"
            )
        if not 0 <= value < len(question.options):
            raise AnswerTypeMismatchError(
                f"Option index {value} is out of range for question '{question.id}'"
            )
    elif not isinstance(value, bool):
        raise AnswerTypeMismatchError(
            f"Question '{question.id}' expects true or false, got {value!r}"
        )


def can_advance(state: SessionState) -> bool:
    question = current_question(state)
    return question is not None and question.id in state.answers


def advance(state: SessionState) -> SessionState:
    """Move forward one question.

    Returns ``state`` itself, untouched, while the current question is
    unanswered; the caller is responsible for warning the user.
    """

    _require_phase(state, SessionPhase.ACTIVE, "move to the next question")
    if not can_advance(state):
        return state
    last = len(state.active_order) - 1
    return replace(state, current_position=min(state.current_position + 1, last))


def retreat(state: SessionState) -> SessionState:
    _require_phase(state, SessionPhase.ACTIVE, "move to the previous question")
    return replace(state, current_position=max(state.current_position - 1, 0))


def finish(state: SessionState, confirm: Callable[[int], bool] | None = None) -> SessionState:
    """Enter the results phase.

    With unanswered questions left, ``confirm`` is called with their count
    and must return ``True``; otherwise the session stays active.
    """

    _require_phase(state, SessionPhase.ACTIVE, "finish the quiz")
    remaining = unanswered_count(state)
    if remaining and (confirm is None or not confirm(remaining)):
        return state
    return replace(state, phase=SessionPhase.RESULTS)


def quit_session(state: SessionState) -> SessionState:
    """Leave an active quiz for the setup page, keeping everything resumable."""

    _require_phase(state, SessionPhase.ACTIVE, "quit the quiz")
    return replace(
        state,
        phase=SessionPhase.SETUP,
        session_id=state.session_id or new_session_id(),
    )


def restart(state: SessionState) -> SessionState:
    """Discard a finished attempt and go back to the setup page."""

    _require_phase(state, SessionPhase.RESULTS, "restart")
    return initial_state()


def current_question(state: SessionState) -> Question | None:
    if state.document is None or not state.active_order:
        return None
    return state.document.get_question(state.active_order[state.current_position])


def answered_count(state: SessionState) -> int:
    return sum(1 for question_id in state.active_order if question_id in state.answers)


def unanswered_count(state: SessionState) -> int:
    return len(state.active_order) - answered_count(state)


def progress_percent(state: SessionState) -> int:
    total = len(state.active_order)
    if not total:
        return 0
    return round(answered_count(state) / total * 100)


def is_completed(state: SessionState) -> bool:
    return bool(state.active_order) and unanswered_count(state) == 0


def _require_phase(state: SessionState, phase: SessionPhase, action: str) -> None:
    if state.phase is not phase or state.document is None:
        raise SessionPhaseError(
            f"Cannot {action} while the session is in the '{state.phase.value}' phase."
        )


def build_snapshot(state: SessionState, timestamp: datetime) -> PersistedSnapshot:
    """Project ``state`` onto the record kept by the session store."""

    if state.document is None or state.session_id is None:
        raise SessionPhaseError("Cannot snapshot a session without a loaded quiz.")
    question = current_question(state)
    return PersistedSnapshot(
        session_id=state.session_id,
        document=document_to_tree(state.document),
        settings=SettingsRecord(random_order=state.settings.random_order),
        answers=dict(state.answers),
        active_order=list(state.active_order),
        current_question_id=question.id if question else None,
        current_position=state.current_position,
        completed=is_completed(state) or state.phase is SessionPhase.RESULTS,
        timestamp=timestamp,
    )


def resume(snapshot: PersistedSnapshot, document: QuizDocument | None = None) -> SessionState:
    """Rebuild an active session from ``snapshot``.

    ``document`` is the quiz as it exists now; when omitted the copy stored in
    the snapshot is used. Ids that disappeared from the quiz are dropped,
    new ids are appended after the saved order, and the shuffle chosen when
    the attempt started is kept as is. If none of the saved ids survive, the
    attempt continues on the stored copy instead.
    """

    if document is None:
        document = normalize_document(snapshot.document)
    order = _merge_order(snapshot.active_order, document.question_ids())
    if not order:
        # Saved order matches nothing in ``document``: replay the stored copy.
        document = normalize_document(snapshot.document)
        stored_ids = document.question_ids()
        order = _merge_order(snapshot.active_order, stored_ids) or stored_ids
    answers = {
        question_id: value
        for question_id, value in snapshot.answers.items()
        if question_id in order and _answer_fits(document.get_question(question_id), value)
    }
    return SessionState(
        document=document,
        settings=QuizSettings(random_order=snapshot.settings.random_order),
        active_order=tuple(order),
        answers=answers,
        current_position=_restore_position(snapshot, order),
        phase=SessionPhase.ACTIVE,
        session_id=snapshot.session_id,
        last_saved_at=snapshot.timestamp,
    )


def _merge_order(preferred: list[str], known: list[str]) -> list[str]:
    known_ids = set(known)
    kept = list(dict.fromkeys(qid for qid in preferred if qid in known_ids))
    if not kept:
        return []
    kept_ids = set(kept)
    return kept + [qid for qid in known if qid not in kept_ids]


def _restore_position(snapshot: PersistedSnapshot, order: list[str]) -> int:
    if not order:
        return 0
    if snapshot.current_question_id in order:
        return order.index(snapshot.current_question_id)
    return min(max(snapshot.current_position, 0), len(order) - 1)


def _answer_fits(question: Question | None, value: object) -> bool:
    if question is None:
        return False
    try:
        check_answer_type(question, value)
    except AnswerTypeMismatchError:
        return False
    return True
