"""Shared fixtures for the quiz runner tests."""

from __future__ import annotations

import random
import time

import pytest

from quiz_runner.core.models import (
    MCQuestion,
    QuizDocument,
    QuizMetadata,
    QuizSettings,
    TFQuestion,
)
from quiz_runner.core.services import game_session
from quiz_runner.core.services.session_store import FileSessionStore

_SAMPLE_JSON = """[
  {"metadata": {"name": "Sample", "author": "Quiz Team"}},
  {"id": "Q1", "type": "tf", "prompt": "2+2=4", "answer": true},
  {"id": "Q2", "type": "mc", "prompt": "pick B", "options": ["A", "B"], "answer": 1,
   "explanation": "B is the second option."}
]
"""

_SAMPLE_YAML = """- metadata:
    name: Sample
    author: Quiz Team
- id: Q1
  type: tf
  prompt: 2+2=4
  answer: true
- id: Q2
  type: mc
  prompt: pick B
  options: [A, B]
  answer: 1
  explanation: B is the second option.
"""


@pytest.fixture
def sample_document() -> QuizDocument:
    return QuizDocument(
        metadata=QuizMetadata(name="Sample", author="Quiz Team"),
        questions=(
            TFQuestion(id="Q1", prompt="2+2=4", answer=True),
            MCQuestion(
                id="Q2",
                prompt="pick B",
                options=("A", "B"),
                answer=1,
                explanation="B is the second option.",
            ),
        ),
    )


@pytest.fixture
def five_question_document() -> QuizDocument:
    return QuizDocument(
        metadata=QuizMetadata(name="Five"),
        questions=tuple(
            MCQuestion(id=f"q{i}", prompt=f"Question {i}", options=("a", "b", "c"), answer=i % 3)
            for i in range(1, 6)
        ),
    )


@pytest.fixture
def active_state(five_question_document):
    """A started, unshuffled session over the five-question document."""
    state = game_session.load_document(game_session.initial_state(), five_question_document)
    return game_session.start_quiz(state, QuizSettings(random_order=False))


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def sample_json() -> str:
    return _SAMPLE_JSON


@pytest.fixture
def sample_yaml() -> str:
    return _SAMPLE_YAML


class SlowFirstWriteStore(FileSessionStore):
    """File store whose first write stalls, keeping a save in flight for a while."""

    first_write_delay = 0.3

    def __init__(self, directory) -> None:
        super().__init__(directory)
        self.writes = 0

    def _write(self, snapshot) -> None:
        self.writes += 1
        if self.writes == 1:
            time.sleep(self.first_write_delay)
        super()._write(snapshot)


@pytest.fixture
def slow_store(tmp_path) -> SlowFirstWriteStore:
    return SlowFirstWriteStore(tmp_path / "slow")
