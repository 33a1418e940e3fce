"""JSON Patch helpers for delta-encoded history entries."""

from __future__ import annotations

import json
from typing import Any

import jsonpatch

from pika_docs.models.content import Content


def make_patch(previous: Content, current: Content) -> list[dict[str, Any]]:
    """Return the RFC 6902 operations that turn ``previous`` into ``current``."""
    return jsonpatch.make_patch(previous, current).patch


def apply_patch(content: Content, operations: list[dict[str, Any]]) -> Content:
    """Apply a patch without mutating the input."""
    return jsonpatch.apply_patch(content, operations, in_place=False)


def should_store_snapshot(
    operations: list[dict[str, Any]],
    content: Content,
    *,
    entries_since_snapshot: int,
    snapshot_interval: int,
) -> bool:
    """Decide whether the next entry should carry a full snapshot.

    A snapshot is stored when the delta would be larger than the content
    itself, and at least every ``snapshot_interval`` entries so a replay never
    has to walk an unbounded chain of patches.
    """
    if entries_since_snapshot + 1 >= snapshot_interval:
        return True
    return len(json.dumps(operations)) >= len(json.dumps(content))
