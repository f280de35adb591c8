"""Turn raw quiz text into a generic tree of lists, dicts and scalars.

Two formats are accepted and sniffed by trial rather than by file
extension: JSON is tried first, then YAML. YAML also accepts most JSON
syntax, so the order matters for texts that are valid in both; a bare
scalar such as ``123`` or ``"yes"`` is always read the JSON way.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from quiz_runner.core.errors import EmptyInputError, ParseError

EXPECTED_SHAPE_HINT = (
    "Expected a list whose first entry is {metadata: {name: ..., author: ...}} "
    "followed by one entry per question (id, type 'mc' or 'tf', prompt, answer)."
)

_BOM = "\ufeff"
_TOO_DEEP = "the document is nested too deeply"


def parse_document(text: str) -> Any:
    """Parse ``text`` as JSON, falling back to YAML.

    Raises :class:`EmptyInputError` for blank input and :class:`ParseError`
    when neither format accepts the text.
    """

    if text.startswith(_BOM):
        text = text[len(_BOM):]
    if not text.strip():
        raise EmptyInputError()

    try:
        return _parse_json(text)
    except (ValueError, RecursionError) as json_exc:
        json_message = _TOO_DEEP if isinstance(json_exc, RecursionError) else str(json_exc)

    try:
        return yaml.safe_load(text)
    except (yaml.YAMLError, RecursionError) as yaml_exc:
        yaml_message = _describe_yaml_error(yaml_exc)

    details = {"json": json_message, "yaml": yaml_message}
    message = (
        "Unable to parse the document as JSON or YAML. Check your syntax.\n"
        f"JSON: {json_message}\n"
        f"YAML: {yaml_message}\n"
        f"{EXPECTED_SHAPE_HINT}"
    )
    raise ParseError("json/yaml", message, details)


def _parse_json(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _describe_yaml_error(exc: Exception) -> str:
    if isinstance(exc, RecursionError):
        return _TOO_DEEP
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None)
    if mark is not None and problem:
        return f"{problem} (line {mark.line + 1}, column {mark.column + 1})"
    return str(exc).replace("\n", " ")
