"""Export graded results as JSON or CSV downloads."""

from __future__ import annotations

import csv
from datetime import date
import io
from pathlib import Path
import re

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel

from quiz_runner.constants.quiz_constants import CSV_HEADERS
from quiz_runner.core.services.scoreboard import QuestionResult

RESULT_FORMATS = ("csv", "json")


class QuizResultRecord(BaseModel):
    """One exported row; serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question_number: int
    question_id: str
    question_text: str
    question_type: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    explanation: str | None = None

    @classmethod
    def from_result(cls, result: QuestionResult) -> "QuizResultRecord":
        return cls(
            question_number=result.question_number,
            question_id=result.question_id,
            question_text=result.question_text,
            question_type=result.question_type,
            user_answer=result.user_answer_label,
            correct_answer=result.correct_answer_label,
            is_correct=result.is_correct,
            explanation=result.explanation,
        )


_RECORDS = TypeAdapter(list[QuizResultRecord])


def results_to_json(results: list[QuestionResult]) -> str:
    records = [QuizResultRecord.from_result(result) for result in results]
    return _RECORDS.dump_json(records, by_alias=True, indent=2).decode("utf-8")


def results_to_csv(results: list[QuestionResult]) -> str:
    """Render ``results`` as CSV; every text cell is quoted, quotes are doubled."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for result in results:
        writer.writerow(
            [
                result.question_number,
                result.question_id,
                result.question_text,
                result.question_type,
                result.user_answer_label,
                result.correct_answer_label,
                "true" if result.is_correct else "false",
                result.explanation or "",
            ]
        )
    return buffer.getvalue()


def export_filename(quiz_name: str, fmt: str, today: date | None = None) -> str:
    """Suggested download name, e.g. ``sample_quiz_results_2024-05-01.csv``."""

    slug = re.sub(r"[^a-z0-9]+", "_", quiz_name.lower()).strip("_") or "quiz"
    return f"{slug}_results_{(today or date.today()).isoformat()}.{fmt}"


def save_results_to_file(file_path: Path, results: list[QuestionResult], fmt: str) -> None:
    if fmt not in RESULT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    content = results_to_csv(results) if fmt == "csv" else results_to_json(results) + "\n"
    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8", newline="")
