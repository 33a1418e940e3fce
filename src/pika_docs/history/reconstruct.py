"""Point-in-time reconstruction of document content from its history."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pika_docs.history.patches import apply_patch
from pika_docs.models.content import Content, clone_content, empty_content

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pika_docs.models.history import HistoryEntry


def oldest_first(entries: Iterable[HistoryEntry]) -> list[HistoryEntry]:
    """Sort entries into replay order (creation time, then sequence, then id)."""
    return sorted(entries, key=lambda entry: entry.order_key)


def reconstruct(entries: list[HistoryEntry], target_entry_id: str) -> Content | None:
    """Replay ``entries`` (oldest first) up to and including ``target_entry_id``.

    Snapshot entries replace the accumulated state and patch entries are
    applied to it, starting from the empty document. Returns ``None`` when the
    target is not in ``entries``. The entries are never mutated.
    """
    state: Content = empty_content()
    for entry in entries:
        if entry.snapshot is not None:
            state = clone_content(entry.snapshot)
        elif entry.patch:
            state = apply_patch(state, entry.patch)
        if entry.id == target_entry_id:
            return state
    return None
