"""Serializable record of an in-progress quiz attempt."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt
from pydantic.alias_generators import to_camel


class SettingsRecord(BaseModel):
    """Persisted form of :class:`QuizSettings`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    random_order: bool = False


class PersistedSnapshot(BaseModel):
    """Everything needed to rebuild a session after the app is closed.

    The JSON form uses camelCase keys (``sessionId``, ``activeOrder``, ...).
    ``document`` holds the quiz in its import shape so restoring it goes
    through the same validation as a freshly loaded file.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    document: list[dict[str, Any]]
    settings: SettingsRecord = Field(default_factory=SettingsRecord)
    answers: dict[str, StrictBool | StrictInt] = Field(default_factory=dict)
    active_order: list[str] = Field(default_factory=list)
    current_question_id: str | None = None
    current_position: int = 0
    completed: bool = False
    timestamp: datetime

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "PersistedSnapshot":
        return cls.model_validate_json(raw)
