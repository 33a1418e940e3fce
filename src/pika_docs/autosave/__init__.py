"""Autosave scheduling and save status tracking."""

from pika_docs.autosave.draft import DraftState
from pika_docs.autosave.scheduler import SaveScheduler
from pika_docs.autosave.status import InvalidTransitionError, SaveStatus, SaveStatusMachine

__all__ = [
    "DraftState",
    "InvalidTransitionError",
    "SaveScheduler",
    "SaveStatus",
    "SaveStatusMachine",
]
