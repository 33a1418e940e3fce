"""Persistence Client contract consumed by the editor core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pika_docs.models.assignment_doc import AssignmentDoc
    from pika_docs.models.content import Content
    from pika_docs.models.history import HistoryEntry, SaveTrigger


@dataclass(frozen=True)
class SaveResult:
    """Authoritative document after a save or restore, plus the history entry it produced."""

    doc: AssignmentDoc
    history_entry: HistoryEntry | None = None


@runtime_checkable
class PersistenceClient(Protocol):
    """Backend operations for one student's assignment document.

    Implementations raise :mod:`pika_docs.errors` exceptions for expected
    failures.
    """

    async def load(self) -> AssignmentDoc:
        """Fetch the current document, creating it on first open."""
        ...

    async def save(self, content: Content, trigger: SaveTrigger) -> SaveResult:
        """Persist ``content``. Idempotent if unchanged from the stored value."""
        ...

    async def submit(self) -> AssignmentDoc:
        ...

    async def unsubmit(self) -> AssignmentDoc:
        ...

    async def list_history(self) -> list[HistoryEntry]:
        """History entries, newest first."""
        ...

    async def restore(self, history_entry_id: str) -> SaveResult:
        """Make the content as of ``history_entry_id`` current; appends an entry."""
        ...
