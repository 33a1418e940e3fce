"""Repository modules for each Cosmos DB container."""

from pika_docs.database.repositories.assignment_docs import AssignmentDocRepository
from pika_docs.database.repositories.assignments import AssignmentRepository
from pika_docs.database.repositories.enrollments import EnrollmentRepository
from pika_docs.database.repositories.history import HistoryRepository

__all__ = [
    "AssignmentDocRepository",
    "AssignmentRepository",
    "EnrollmentRepository",
    "HistoryRepository",
]
