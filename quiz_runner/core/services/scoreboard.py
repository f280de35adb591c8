"""Scoring of a finished quiz attempt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from quiz_runner.constants.quiz_constants import FALSE_LABEL, TRUE_LABEL, UNANSWERED_LABEL
from quiz_runner.core.models import AnswerValue, MCQuestion, Question, QuizDocument


@dataclass(frozen=True, slots=True)
class QuestionResult:
    """Outcome of one question, in the order the quiz was authored."""

    question_number: int
    question_id: str
    question_text: str
    question_type: str
    user_answer_label: str
    correct_answer_label: str
    is_answered: bool
    is_correct: bool
    explanation: str | None = None


@dataclass(frozen=True, slots=True)
class ScoreSummary:
    correct: int
    total: int

    @property
    def percent(self) -> int:
        return round(self.correct / self.total * 100) if self.total else 0


def score(document: QuizDocument, answers: Mapping[str, AnswerValue]) -> list[QuestionResult]:
    """Grade ``answers`` against ``document`` without side effects.

    Comparison is type-strict: ``True`` never matches option index ``1``.
    """

    results: list[QuestionResult] = []
    for number, question in enumerate(document.questions, start=1):
        has_answer = question.id in answers
        user_value = answers.get(question.id)
        results.append(
            QuestionResult(
                question_number=number,
                question_id=question.id,
                question_text=question.prompt,
                question_type=question.question_type,
                user_answer_label=format_user_answer(question, user_value),
                correct_answer_label=format_correct_answer(question),
                is_answered=has_answer,
                is_correct=has_answer and _matches(question, user_value),
                explanation=question.explanation,
            )
        )
    return results


def summarize(results: list[QuestionResult]) -> ScoreSummary:
    return ScoreSummary(correct=sum(1 for r in results if r.is_correct), total=len(results))


def format_correct_answer(question: Question) -> str:
    if isinstance(question, MCQuestion):
        return question.options[question.answer]
    return TRUE_LABEL if question.answer else FALSE_LABEL


def format_user_answer(question: Question, value: AnswerValue | None) -> str:
    if isinstance(question, MCQuestion):
        if isinstance(value, bool) or not isinstance(value, int):
            return UNANSWERED_LABEL
        if not 0 <= value < len(question.options):
            return UNANSWERED_LABEL
        return question.options[value]
    if not isinstance(value, bool):
        return UNANSWERED_LABEL
    return TRUE_LABEL if value else FALSE_LABEL


def _matches(question: Question, value: AnswerValue | None) -> bool:
    if isinstance(question, MCQuestion):
        return not isinstance(value, bool) and isinstance(value, int) and value == question.answer
    return isinstance(value, bool) and value is question.answer
