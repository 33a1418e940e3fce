"""History entry model: immutable records of committed saves."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pika_docs.models.base import DocumentBase
from pika_docs.models.content import Content


class SaveTrigger(StrEnum):
    """What caused a save request to be issued."""

    AUTOSAVE = "autosave"
    BLUR = "blur"
    FORCE = "force"


class HistoryTrigger(StrEnum):
    """What caused a history entry to be appended."""

    BASELINE = "baseline"
    AUTOSAVE = "autosave"
    BLUR = "blur"
    FORCE = "force"
    RESTORE = "restore"


def history_entry_id(doc_id: str, sequence: int) -> str:
    """Stored id of a document's entry at ``sequence``. One entry per sequence."""
    return f"{doc_id}:{sequence}"


class HistoryEntry(DocumentBase):
    """One committed save of a document. Entries are never changed once built.

    Exactly one of ``snapshot`` (the full content) or ``patch`` (a JSON Patch
    from the previous entry's content) is set.
    """

    model_config = ConfigDict(frozen=True)

    doc_id: str
    sequence: int
    trigger: HistoryTrigger
    snapshot: Content | None = None
    patch: list[dict[str, Any]] | None = None
    char_count: int = 0
    word_count: int = 0

    @property
    def order_key(self) -> tuple:
        """Total order of entries within one document."""
        return (self.created_at, self.sequence, self.id)


class SaveRequest(BaseModel):
    """Body of a save call."""

    content: Content
    trigger: SaveTrigger = SaveTrigger.AUTOSAVE


class RestoreRequest(BaseModel):
    history_id: str = Field(min_length=1)


class InstructionsUpdate(BaseModel):
    instructions: Content
