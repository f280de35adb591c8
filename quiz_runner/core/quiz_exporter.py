"""Serialise quizzes back to the JSON/YAML document format used for imports."""

from __future__ import annotations

import json
from typing import Any

import yaml

from quiz_runner.core.models import MCQuestion, Question, QuizDocument


def document_to_tree(document: QuizDocument) -> list[dict[str, Any]]:
    """Build the generic tree that :func:`normalize_document` accepts."""

    metadata: dict[str, Any] = {"name": document.metadata.name}
    if document.metadata.author is not None:
        metadata["author"] = document.metadata.author
    tree: list[dict[str, Any]] = [{"metadata": metadata}]
    tree.extend(_question_to_dict(question) for question in document.questions)
    return tree


def serialize_document(document: QuizDocument, fmt: str = "json") -> str:
    """Render ``document`` as JSON or YAML text."""

    tree = document_to_tree(document)
    if fmt == "json":
        return json.dumps(tree, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(tree, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported document format: {fmt!r}")


def _question_to_dict(question: Question) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": question.id,
        "type": question.question_type,
        "prompt": question.prompt,
    }
    if isinstance(question, MCQuestion):
        data["options"] = list(question.options)
    data["answer"] = question.answer
    if question.explanation is not None:
        data["explanation"] = question.explanation
    return data
