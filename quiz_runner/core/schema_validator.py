"""Validate a parsed quiz tree and build the typed :class:`QuizDocument`.

Every question is checked independently and all problems are reported
together, so an author editing a file by hand can fix them in one pass.
Metadata problems are fatal straight away because question messages have
nothing to hang off without a quiz name.
"""

from __future__ import annotations

import math
from typing import Any

from quiz_runner.core.errors import ValidationError
from quiz_runner.core.models import MCQuestion, Question, QuizDocument, QuizMetadata, TFQuestion

_QUESTION_TYPES = ("mc", "tf")
_REQUIRED_FIELDS = ("id", "type", "prompt")


def normalize_document(tree: Any) -> QuizDocument:
    """Return the typed document for ``tree`` or raise :class:`ValidationError`."""

    metadata = _normalize_metadata(tree)

    errors: list[str] = []
    questions: list[Question] = []
    seen_ids: dict[str, int] = {}
    for number, raw in enumerate(tree[1:], start=1):
        question = _normalize_question(raw, number, errors)
        if question is None:
            continue
        first_number = seen_ids.get(question.id)
        if first_number is not None:
            errors.append(
                f"Question {number}: id '{question.id}' is already used by question {first_number}."
            )
            continue
        seen_ids[question.id] = number
        questions.append(question)

    if not questions:
        errors.append("The document contains no valid questions after the metadata entry.")
    if errors:
        raise ValidationError(errors)
    return QuizDocument(metadata=metadata, questions=tuple(questions))


def _normalize_metadata(tree: Any) -> QuizMetadata:
    if not isinstance(tree, list) or not tree:
        raise ValidationError(
            ["The document must be a non-empty list: a metadata entry followed by questions."]
        )
    head = tree[0]
    if not isinstance(head, dict) or not isinstance(head.get("metadata"), dict):
        raise ValidationError(["The first entry must be an object containing a 'metadata' object."])
    raw_metadata = head["metadata"]
    name = raw_metadata.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(["metadata.name must be a non-empty string."])
    author = raw_metadata.get("author")
    return QuizMetadata(name=name.strip(), author=None if author is None else str(author))


def _normalize_question(raw: Any, number: int, errors: list[str]) -> Question | None:
    if not isinstance(raw, dict):
        errors.append(f"Question {number} is not an object.")
        return None

    missing = [name for name in _REQUIRED_FIELDS if _is_blank(raw.get(name))]
    if missing:
        errors.append(f"Question {number} is missing required field(s): {', '.join(missing)}.")
        return None

    label = f"Question {number} ('{raw['id']}')"
    question_type = raw["type"]
    if question_type not in _QUESTION_TYPES:
        errors.append(f"{label} has unknown type '{question_type}'. Use 'mc' or 'tf'.")
        return None

    question_id = str(raw["id"]).strip()
    prompt = str(raw["prompt"])
    explanation = _optional_text(raw.get("explanation"))
    if question_type == "mc":
        return _normalize_mc(raw, label, errors, question_id, prompt, explanation)

    answer = raw.get("answer")
    if not isinstance(answer, bool):
        errors.append(f"{label} requires a boolean answer (true/false), got {answer!r}.")
        return None
    return TFQuestion(id=question_id, prompt=prompt, answer=answer, explanation=explanation)


def _normalize_mc(
    raw: dict[str, Any],
    label: str,
    errors: list[str],
    question_id: str,
    prompt: str,
    explanation: str | None,
) -> MCQuestion | None:
    options = raw.get("options")
    answer = raw.get("answer")
    problems: list[str] = []
    if not isinstance(options, list) or len(options) < 2:
        problems.append(f"{label} requires an options list with at least 2 entries.")
    if isinstance(answer, bool) or not isinstance(answer, (int, float)):
        problems.append(f"{label} requires a numeric answer (index into options), got {answer!r}.")
    elif isinstance(answer, float) and not (math.isfinite(answer) and answer.is_integer()):
        problems.append(f"{label} answer must be a whole-number index, got {answer!r}.")
    if problems:
        errors.extend(problems)
        return None

    index = int(answer)
    if not 0 <= index < len(options):
        errors.append(
            f"{label} has answer index {index} out of range; "
            f"expected 0 to {len(options) - 1} for {len(options)} options."
        )
        return None
    return MCQuestion(
        id=question_id,
        prompt=prompt,
        options=tuple(str(option) for option in options),
        answer=index,
        explanation=explanation,
    )


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None
