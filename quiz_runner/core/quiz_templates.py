"""Starter documents offered to authors on the setup page."""

from __future__ import annotations

_JSON_TEMPLATE = """[
  {
    "metadata": {
      "name": "<your quiz name>",
      "author": "<optional author>"
    }
  },
  {
    "id": "q1",
    "type": "mc",
    "prompt": "<your question here>",
    "options": ["A", "B", "C", "D"],
    "answer": 0,
    "explanation": "<optional explanation>"
  },
  {
    "id": "q2",
    "type": "tf",
    "prompt": "<your true/false statement here>",
    "answer": true
  }
]
"""

_YAML_TEMPLATE = """- metadata:
    name: "<your quiz name>"
    author: "<optional author>"
- id: q1
  type: mc
  prompt: "<your question here>"
  options: ["A", "B", "C", "D"]
  answer: 0
  explanation: "<optional explanation>"
- id: q2
  type: tf
  prompt: "<your true/false statement here>"
  answer: true
"""


def get_template(kind: str) -> str:
    """Return the starter document for ``kind`` (``"json"`` or ``"yaml"``)."""

    if kind == "json":
        return _JSON_TEMPLATE
    if kind == "yaml":
        return _YAML_TEMPLATE
    raise ValueError(f"Unknown template kind: {kind!r}")
