"""Data models for Cosmos DB document types and request bodies."""

from pika_docs.models.assignment import Assignment
from pika_docs.models.assignment_doc import AssignmentDoc
from pika_docs.models.enrollment import Enrollment
from pika_docs.models.history import (
    HistoryEntry,
    HistoryTrigger,
    InstructionsUpdate,
    RestoreRequest,
    SaveRequest,
    SaveTrigger,
)

__all__ = [
    "Assignment",
    "AssignmentDoc",
    "Enrollment",
    "HistoryEntry",
    "HistoryTrigger",
    "InstructionsUpdate",
    "RestoreRequest",
    "SaveRequest",
    "SaveTrigger",
]
