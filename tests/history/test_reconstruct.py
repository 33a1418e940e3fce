"""Tests for point-in-time reconstruction."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pika_docs.history.patches import make_patch
from pika_docs.history.reconstruct import oldest_first, reconstruct
from pika_docs.models.content import clone_content, empty_content
from pika_docs.models.history import HistoryEntry, HistoryTrigger
from tests.support import doc

_T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


def _build(contents: list[dict], *, snapshot_every: int = 0) -> list[HistoryEntry]:
    """Record sequential saves the way the history service writes them."""
    entries: list[HistoryEntry] = []
    previous = empty_content()
    for index, content in enumerate(contents, start=1):
        as_snapshot = index == 1 or bool(snapshot_every and index % snapshot_every == 0)
        entries.append(
            HistoryEntry(
                doc_id="doc-1",
                sequence=index,
                trigger=HistoryTrigger.BASELINE if index == 1 else HistoryTrigger.AUTOSAVE,
                created_at=_T0 + timedelta(seconds=index),
                snapshot=clone_content(content) if as_snapshot else None,
                patch=None if as_snapshot else make_patch(previous, content),
            )
        )
        previous = content
    return entries


def test_worked_example() -> None:
    a, c = doc("A"), doc("C")
    h1, h2 = _build([a, c])

    assert reconstruct([h1, h2], h1.id) == a
    assert reconstruct([h1, h2], h2.id) == c


def test_round_trip_over_patches_and_snapshots() -> None:
    contents = [doc(*["line"] * n, f"rev {n}") for n in range(1, 12)]
    entries = _build(contents, snapshot_every=4)

    for entry, expected in zip(entries, contents, strict=True):
        assert reconstruct(entries, entry.id) == expected


def test_unknown_entry_returns_none() -> None:
    entries = _build([doc("a"), doc("b")])
    assert reconstruct(entries, "missing") is None


def test_empty_log_returns_none() -> None:
    assert reconstruct([], "anything") is None


def test_does_not_mutate_entries() -> None:
    entries = _build([doc("a"), doc("a", "b"), doc("b")])
    before = [entry.model_dump() for entry in entries]

    result = reconstruct(entries, entries[1].id)
    result["content"].clear()
    reconstruct(entries, entries[2].id)

    assert [entry.model_dump() for entry in entries] == before


def test_oldest_first_uses_time_then_sequence() -> None:
    same_time = _T0
    late = HistoryEntry(doc_id="d", sequence=1, trigger=HistoryTrigger.AUTOSAVE,
                        created_at=same_time + timedelta(minutes=1))
    tie_b = HistoryEntry(doc_id="d", sequence=3, trigger=HistoryTrigger.AUTOSAVE,
                         created_at=same_time)
    tie_a = HistoryEntry(doc_id="d", sequence=2, trigger=HistoryTrigger.AUTOSAVE,
                         created_at=same_time)

    assert oldest_first([late, tie_b, tie_a]) == [tie_a, tie_b, late]
