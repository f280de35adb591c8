"""Load quizzes from pasted text or uploaded files.

Accepted documents (JSON or YAML, sniffed from the content):

    - metadata:
        name: Sample
        author: Jane Doe          # optional
    - id: q1
      type: mc
      prompt: Pick B
      options: [A, B]
      answer: 1                  # index into options
      explanation: optional text
    - id: q2
      type: tf
      prompt: 2 + 2 = 4
      answer: true

The file extension is only used by the open dialog; the parser decides the
format by trying JSON first and YAML second.
"""

from __future__ import annotations

import logging
from pathlib import Path

from quiz_runner.constants.quiz_constants import SUPPORTED_DOCUMENT_EXTENSIONS
from quiz_runner.core.document_parser import parse_document
from quiz_runner.core.errors import QuizImportError
from quiz_runner.core.models import QuizDocument
from quiz_runner.core.schema_validator import normalize_document

logger = logging.getLogger(__name__)


def load_quiz_from_text(text: str) -> QuizDocument:
    """Parse and validate ``text`` into a :class:`QuizDocument`."""

    document = normalize_document(parse_document(text))
    logger.info(
        "Loaded quiz '%s' with %d question(s)", document.metadata.name, len(document.questions)
    )
    return document


def load_quiz_from_file(file_path: Path) -> QuizDocument:
    if file_path.suffix.lower() not in SUPPORTED_DOCUMENT_EXTENSIONS:
        logger.info("Unexpected extension for %s; sniffing the content anyway", file_path.name)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise QuizImportError("Failed to read the file.") from exc
    return load_quiz_from_text(text)
