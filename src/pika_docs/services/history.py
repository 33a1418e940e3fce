"""Appending history entries: baseline, JSON Patch delta or full snapshot."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pika_docs.errors import TransientPersistenceError
from pika_docs.history.patches import make_patch, should_store_snapshot
from pika_docs.history.reconstruct import oldest_first, reconstruct
from pika_docs.models.content import clone_content, count_characters, count_words, empty_content
from pika_docs.models.history import HistoryEntry, HistoryTrigger, history_entry_id

if TYPE_CHECKING:
    from pika_docs.database.repositories.history import HistoryRepository
    from pika_docs.models.content import Content

logger = logging.getLogger(__name__)

_MAX_APPEND_ATTEMPTS = 5


def entries_since_snapshot(newest_first: list[HistoryEntry]) -> int:
    """Number of patch entries written after the most recent snapshot."""
    count = 0
    for entry in newest_first:
        if entry.snapshot is not None:
            break
        count += 1
    return count


def _next_entry(
    existing: list[HistoryEntry],
    doc_id: str,
    content: Content,
    trigger: HistoryTrigger,
    *,
    snapshot_interval: int,
    force_snapshot: bool = False,
) -> HistoryEntry | None:
    """Build the entry that follows ``existing``, or None when nothing changed."""
    counts = {"char_count": count_characters(content), "word_count": count_words(content)}
    if not existing:
        return HistoryEntry(
            id=history_entry_id(doc_id, 1),
            doc_id=doc_id,
            sequence=1,
            trigger=HistoryTrigger.BASELINE,
            snapshot=clone_content(content),
            **counts,
        )

    newest_first = sorted(existing, key=lambda e: e.order_key, reverse=True)
    latest = newest_first[0]
    previous = reconstruct(oldest_first(existing), latest.id)
    operations = make_patch(previous or empty_content(), content)
    if not operations and not force_snapshot:
        return None

    as_snapshot = force_snapshot or should_store_snapshot(
        operations,
        content,
        entries_since_snapshot=entries_since_snapshot(newest_first),
        snapshot_interval=snapshot_interval,
    )
    sequence = latest.sequence + 1
    return HistoryEntry(
        id=history_entry_id(doc_id, sequence),
        doc_id=doc_id,
        sequence=sequence,
        trigger=trigger,
        # created_at must never sort before the entry it follows.
        created_at=max(datetime.now(UTC), latest.created_at),
        snapshot=clone_content(content) if as_snapshot else None,
        patch=None if as_snapshot else operations,
        **counts,
    )


async def append_history(
    history_repo: HistoryRepository,
    doc_id: str,
    content: Content,
    trigger: HistoryTrigger,
    *,
    snapshot_interval: int,
    force_snapshot: bool = False,
) -> HistoryEntry | None:
    """Append one entry recording ``content`` as the document's new state.

    The first entry of a document is always a ``baseline`` snapshot. Later
    entries store a patch from the previous entry's content, or a snapshot when
    ``force_snapshot`` is set or the snapshot policy asks for one. Returns None
    when ``content`` equals the latest recorded state.

    When another writer takes the next sequence first, the history is read
    again and the entry rebuilt on top of the new latest entry.
    """
    for _ in range(_MAX_APPEND_ATTEMPTS):
        existing = await history_repo.list_by_doc(doc_id)
        entry = _next_entry(
            existing,
            doc_id,
            content,
            trigger,
            snapshot_interval=snapshot_interval,
            force_snapshot=force_snapshot,
        )
        if entry is None:
            return None

        created = await history_repo.append(entry)
        if created is None:
            logger.info("History append raced, retrying: doc=%s seq=%d", doc_id, entry.sequence)
            continue

        logger.info(
            "History appended: doc=%s entry=%s seq=%d kind=%s trigger=%s",
            doc_id,
            created.id,
            created.sequence,
            "snapshot" if created.snapshot is not None else "patch",
            created.trigger,
        )
        return created

    raise TransientPersistenceError("History changed while saving, try again")
