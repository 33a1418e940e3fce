"""Tests for JSON Patch helpers and the snapshot policy."""

from pika_docs.history.patches import apply_patch, make_patch, should_store_snapshot
from tests.support import doc


def test_patch_applies_without_mutating_input() -> None:
    before, after = doc("one"), doc("one", "two")
    ops = make_patch(before, after)

    assert apply_patch(before, ops) == after
    assert before == doc("one")


def test_identical_content_has_empty_patch() -> None:
    assert make_patch(doc("x"), doc("x")) == []


def test_small_patch_on_large_doc_is_not_a_snapshot() -> None:
    content = doc(*[f"paragraph {n} with plenty of text" for n in range(20)])
    ops = make_patch(doc(*[f"paragraph {n} with plenty of text" for n in range(19)]), content)

    assert not should_store_snapshot(ops, content, entries_since_snapshot=1, snapshot_interval=20)


def test_patch_larger_than_content_is_a_snapshot() -> None:
    content = doc("b")
    ops = make_patch(doc("a long paragraph that is replaced", "and another"), content)

    assert should_store_snapshot(ops, content, entries_since_snapshot=1, snapshot_interval=20)


def test_snapshot_interval_forces_snapshot() -> None:
    content = doc(*[f"paragraph {n}" for n in range(20)])
    ops = [{"op": "replace", "path": "/content/0/content/0/text", "value": "x"}]

    assert should_store_snapshot(ops, content, entries_since_snapshot=19, snapshot_interval=20)
    assert not should_store_snapshot(ops, content, entries_since_snapshot=5, snapshot_interval=20)
