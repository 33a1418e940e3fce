"""Client-side view of a document's history."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pika_docs.errors import PersistenceError
from pika_docs.history.reconstruct import oldest_first, reconstruct

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pika_docs.models.content import Content
    from pika_docs.models.history import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryLog:
    """Holds the history of one document, newest first.

    Entries arrive from a full listing (``refresh``) or one at a time from save
    responses (``merge``). The log never edits an entry's content.
    """

    def __init__(self, fetch: Callable[[], Awaitable[list[HistoryEntry]]]) -> None:
        self._fetch = fetch
        self._entries: list[HistoryEntry] = []
        self.error: str = ""

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    async def refresh(self) -> bool:
        """Reload the full listing. Returns False and records an error on failure."""
        self.error = ""
        try:
            entries = await self._fetch()
        except PersistenceError as exc:
            self.error = str(exc) or "Failed to load history"
            logger.warning("History refresh failed: %s", self.error)
            return False
        self._entries = sorted(entries, key=lambda e: e.order_key, reverse=True)
        logger.debug("History refreshed: entries=%d", len(self._entries))
        return True

    def merge(self, entry: HistoryEntry) -> None:
        """Insert a new entry, or replace one with the same id, keeping newest first."""
        remaining = [existing for existing in self._entries if existing.id != entry.id]
        remaining.append(entry)
        self._entries = sorted(remaining, key=lambda e: e.order_key, reverse=True)

    def find(self, entry_id: str) -> HistoryEntry | None:
        return next((entry for entry in self._entries if entry.id == entry_id), None)

    def oldest_first(self) -> list[HistoryEntry]:
        return oldest_first(self._entries)

    def content_at(self, entry_id: str) -> Content | None:
        """Content as of ``entry_id``, or None if the entry is not in the log."""
        return reconstruct(self.oldest_first(), entry_id)
