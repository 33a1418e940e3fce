"""Append-only history log and point-in-time reconstruction."""

from pika_docs.history.log import HistoryLog
from pika_docs.history.patches import apply_patch, make_patch, should_store_snapshot
from pika_docs.history.reconstruct import oldest_first, reconstruct

__all__ = [
    "HistoryLog",
    "apply_patch",
    "make_patch",
    "oldest_first",
    "reconstruct",
    "should_store_snapshot",
]
