"""Exception types raised by the quiz runner core."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class QuizImportError(Exception):
    """Raised when a quiz document cannot be turned into a quiz."""


class EmptyInputError(QuizImportError):
    """Raised before parsing when the document holds no content at all."""

    def __init__(self) -> None:
        super().__init__("The document is empty. Paste or open a quiz in JSON or YAML format.")


class ParseError(QuizImportError):
    """Raised when the text is neither valid JSON nor valid YAML."""

    def __init__(self, format: str, message: str, details: Mapping[str, str] | None = None) -> None:
        super().__init__(message)
        self.format = format
        self.message = message
        self.details = dict(details or {})


class ValidationError(QuizImportError):
    """Raised with every schema problem found in a parsed document."""

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class AnswerTypeMismatchError(ValueError):
    """Raised when an answer value does not fit the question it targets."""


class SessionPhaseError(RuntimeError):
    """Raised when a session operation is not allowed in the current phase."""


class StorageError(Exception):
    """Raised when the session store fails to read or write a record."""
