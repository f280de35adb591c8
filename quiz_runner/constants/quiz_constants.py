"""Quiz-related constants shared across UI and core layers."""

from datetime import timedelta
from pathlib import Path

AUTOSAVE_DEBOUNCE_SECONDS: float = 1.0
RESUME_MAX_AGE: timedelta = timedelta(days=7)
SESSION_STORE_DIR: Path = Path.home() / ".quiz_runner" / "sessions"

SUPPORTED_DOCUMENT_EXTENSIONS: tuple[str, ...] = (".json", ".yaml", ".yml")
UNANSWERED_LABEL: str = "(no answer)"
TRUE_LABEL: str = "True"
FALSE_LABEL: str = "False"

CSV_HEADERS: tuple[str, ...] = (
    "Question Number",
    "Question ID",
    "Question Text",
    "Question Type",
    "User Answer",
    "Correct Answer",
    "Is Correct",
    "Explanation",
)
