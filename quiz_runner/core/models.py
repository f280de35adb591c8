"""Domain models for the quiz runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Mapping, Union


@dataclass(frozen=True, slots=True)
class QuizMetadata:
    """Title block found at the top of every quiz document."""

    name: str
    author: str | None = None


@dataclass(frozen=True, slots=True)
class MCQuestion:
    """Multiple-choice question; ``answer`` indexes into ``options``."""

    question_type: ClassVar[str] = "mc"

    id: str
    prompt: str
    options: tuple[str, ...]
    answer: int
    explanation: str | None = None


@dataclass(frozen=True, slots=True)
class TFQuestion:
    """True/false statement."""

    question_type: ClassVar[str] = "tf"

    id: str
    prompt: str
    answer: bool
    explanation: str | None = None


Question = Union[MCQuestion, TFQuestion]
AnswerValue = Union[int, bool]


@dataclass(frozen=True, slots=True)
class QuizDocument:
    """Validated quiz: metadata plus questions in authoring order."""

    metadata: QuizMetadata
    questions: tuple[Question, ...]

    def question_ids(self) -> list[str]:
        return [question.id for question in self.questions]

    def get_question(self, question_id: str) -> Question | None:
        return next((q for q in self.questions if q.id == question_id), None)


@dataclass(frozen=True, slots=True)
class QuizSettings:
    """Options chosen on the settings page before a quiz starts."""

    random_order: bool = False


class SessionPhase(Enum):
    """Coarse stage of a quiz attempt."""

    SETUP = "setup"
    SETTINGS = "settings"
    ACTIVE = "active"
    RESULTS = "results"


@dataclass(frozen=True, slots=True)
class SessionState:
    """Immutable view of one quiz attempt.

    ``answers`` only contains answered question ids; a missing id means the
    question is still unanswered. ``active_order`` stays empty until the quiz
    is started and is never reshuffled afterwards.
    """

    document: QuizDocument | None = None
    settings: QuizSettings = field(default_factory=QuizSettings)
    active_order: tuple[str, ...] = ()
    answers: Mapping[str, AnswerValue] = field(default_factory=dict)
    current_position: int = 0
    phase: SessionPhase = SessionPhase.SETUP
    session_id: str | None = None
    last_saved_at: datetime | None = None
