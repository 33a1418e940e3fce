"""Repository for the assignment_doc_history container (partitioned by /doc_id).

History is append-only: entries are created and read, never updated.
"""

from __future__ import annotations

import logging

from azure.cosmos.exceptions import CosmosResourceExistsError

from pika_docs.database.repositories.base import BaseRepository
from pika_docs.models.history import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryRepository(BaseRepository[HistoryEntry]):
    container_name = "assignment_doc_history"
    model_class = HistoryEntry

    async def list_by_doc(self, doc_id: str) -> list[HistoryEntry]:
        """Fetch every entry for a document, newest first."""
        return await self.query(
            "SELECT * FROM c WHERE c.doc_id = @doc_id"
            " ORDER BY c.sequence DESC",
            [{"name": "@doc_id", "value": doc_id}],
        )

    async def append(self, entry: HistoryEntry) -> HistoryEntry | None:
        """Create ``entry``, or return None when its sequence is already taken.

        Entry ids are derived from ``(doc_id, sequence)``, so a second writer
        for the same sequence gets a conflict instead of a duplicate.
        """
        try:
            return await self.create(entry)
        except CosmosResourceExistsError:
            logger.debug("History sequence taken: doc=%s seq=%d", entry.doc_id, entry.sequence)
            return None
