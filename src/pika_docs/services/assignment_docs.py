"""Assignment doc business logic: open, save, submit, unsubmit, history, restore."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pika_docs.database.repositories.assignment_docs import AssignmentDocRepository
from pika_docs.database.repositories.assignments import AssignmentRepository
from pika_docs.database.repositories.enrollments import EnrollmentRepository
from pika_docs.database.repositories.history import HistoryRepository
from pika_docs.errors import (
    AccessDeniedError,
    DocumentLockedError,
    NotFoundError,
    StaleReferenceError,
    ValidationError,
)
from pika_docs.history.reconstruct import oldest_first, reconstruct
from pika_docs.models.assignment_doc import AssignmentDoc
from pika_docs.models.content import contents_equal, is_empty, is_valid_content
from pika_docs.models.history import HistoryEntry, HistoryTrigger, SaveTrigger
from pika_docs.services.history import append_history

if TYPE_CHECKING:
    from azure.cosmos.aio import DatabaseProxy

    from pika_docs.events import EventPublisher
    from pika_docs.models.assignment import Assignment
    from pika_docs.models.content import Content

logger = logging.getLogger(__name__)

STUDENT = "student"
TEACHER = "teacher"


class AssignmentDocService:
    """Operations on the response document a student keeps for one assignment.

    ``user`` is the session user mapping with ``id`` and ``role`` keys.
    """

    def __init__(
        self,
        database: DatabaseProxy,
        publisher: EventPublisher | None = None,
        *,
        snapshot_interval: int = 20,
    ) -> None:
        self.assignments = AssignmentRepository(database)
        self.docs = AssignmentDocRepository(database)
        self.enrollments = EnrollmentRepository(database)
        self.history = HistoryRepository(database)
        self._publisher = publisher
        self._snapshot_interval = snapshot_interval

    async def _publish(self, event_type: str, data: dict[str, Any]) -> None:
        if self._publisher is not None:
            await self._publisher.publish(event_type, data)

    async def _assignment(self, assignment_id: str) -> Assignment:
        assignment = await self.assignments.get_by_id(assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        return assignment

    async def _require_enrolled(self, assignment: Assignment, student_id: str) -> None:
        if not await self.enrollments.is_enrolled(assignment.classroom_id, student_id):
            raise AccessDeniedError("Not enrolled in this classroom")

    async def _student_context(
        self, user: dict[str, Any], assignment_id: str
    ) -> tuple[Assignment, str]:
        if user.get("role") != STUDENT:
            raise AccessDeniedError("Forbidden")
        assignment = await self._assignment(assignment_id)
        await self._require_enrolled(assignment, user["id"])
        return assignment, user["id"]

    async def _existing_doc(self, assignment_id: str, student_id: str) -> AssignmentDoc:
        doc = await self.docs.get_for_student(assignment_id, student_id)
        if doc is None:
            raise NotFoundError("Assignment doc not found")
        return doc

    async def open(
        self, user: dict[str, Any], assignment_id: str
    ) -> tuple[Assignment, AssignmentDoc]:
        """Return the assignment and the student's doc, creating the doc on first open."""
        assignment, student_id = await self._student_context(user, assignment_id)
        doc = await self.docs.get_for_student(assignment_id, student_id)
        if doc is None:
            doc = await self.docs.create(
                AssignmentDoc(assignment_id=assignment_id, student_id=student_id)
            )
            logger.info("Assignment doc created: doc=%s student=%s", doc.id, student_id)
        return assignment, doc

    async def save(
        self,
        user: dict[str, Any],
        assignment_id: str,
        content: Content,
        trigger: SaveTrigger = SaveTrigger.AUTOSAVE,
    ) -> tuple[AssignmentDoc, HistoryEntry | None]:
        """Persist new content and append a history entry.

        Saving content equal to what is stored changes nothing and appends no
        entry. Overlapping saves of one document each get their own history
        sequence, and the stored content follows the newest entry.
        """
        if not is_valid_content(content):
            raise ValidationError("Content is required")
        _, student_id = await self._student_context(user, assignment_id)
        doc = await self._existing_doc(assignment_id, student_id)
        if doc.is_submitted:
            raise DocumentLockedError("Cannot edit a submitted document")
        if contents_equal(doc.content, content):
            logger.debug("Save unchanged: doc=%s", doc.id)
            return doc, None

        entry = await append_history(
            self.history,
            doc.id,
            content,
            HistoryTrigger(trigger.value),
            snapshot_interval=self._snapshot_interval,
        )
        if entry is None:
            return doc, None
        doc = await self.docs.store_content(doc.id, content, entry.sequence)
        logger.info("Doc saved: doc=%s trigger=%s", doc.id, trigger)
        await self._publish(
            "doc-saved",
            {"doc_id": doc.id, "history_id": entry.id},
        )
        return doc, entry

    async def submit(self, user: dict[str, Any], assignment_id: str) -> AssignmentDoc:
        """Lock the document for grading. Empty documents cannot be submitted."""
        _, student_id = await self._student_context(user, assignment_id)
        doc = await self._existing_doc(assignment_id, student_id)
        if is_empty(doc.content):
            raise ValidationError("No work to submit. Please write something first.")
        doc.is_submitted = True
        doc.submitted_at = datetime.now(UTC)
        doc = await self.docs.update(doc)
        logger.info("Doc submitted: doc=%s", doc.id)
        await self._publish("doc-submitted", {"doc_id": doc.id})
        return doc

    async def unsubmit(self, user: dict[str, Any], assignment_id: str) -> AssignmentDoc:
        _, student_id = await self._student_context(user, assignment_id)
        doc = await self._existing_doc(assignment_id, student_id)
        doc.is_submitted = False
        doc.submitted_at = None
        doc = await self.docs.update(doc)
        logger.info("Doc unsubmitted: doc=%s", doc.id)
        await self._publish("doc-unsubmitted", {"doc_id": doc.id})
        return doc

    async def list_history(
        self,
        user: dict[str, Any],
        assignment_id: str,
        student_id: str | None = None,
    ) -> tuple[list[HistoryEntry], str | None]:
        """History of a student's doc, newest first, with the doc id.

        Students read their own history. The assignment's teacher reads a
        student's history by passing ``student_id``.
        """
        assignment = await self._assignment(assignment_id)
        if user.get("role") == TEACHER:
            if assignment.teacher_id != user["id"]:
                raise AccessDeniedError("Unauthorized")
            if not student_id:
                raise ValidationError("student_id is required")
            owner_id = student_id
        else:
            owner_id = user["id"]
        await self._require_enrolled(assignment, owner_id)

        doc = await self.docs.get_for_student(assignment_id, owner_id)
        if doc is None:
            return [], None
        entries = await self.history.list_by_doc(doc.id)
        return sorted(entries, key=lambda e: e.order_key, reverse=True), doc.id

    async def restore(
        self, user: dict[str, Any], assignment_id: str, history_id: str
    ) -> tuple[AssignmentDoc, HistoryEntry | None]:
        """Set the document content to its state as of ``history_id``.

        Earlier entries are kept. The restore itself is recorded as a new
        snapshot entry.
        """
        if not history_id:
            raise ValidationError("history_id is required")
        _, student_id = await self._student_context(user, assignment_id)
        doc = await self._existing_doc(assignment_id, student_id)
        if doc.is_submitted:
            raise DocumentLockedError("Cannot restore a submitted document")

        entries = oldest_first(await self.history.list_by_doc(doc.id))
        restored = reconstruct(entries, history_id)
        if restored is None:
            raise StaleReferenceError("History entry not found")

        entry = await append_history(
            self.history,
            doc.id,
            restored,
            HistoryTrigger.RESTORE,
            snapshot_interval=self._snapshot_interval,
            force_snapshot=True,
        )
        if entry is not None:
            doc = await self.docs.store_content(doc.id, restored, entry.sequence)
        logger.info("Doc restored: doc=%s from=%s", doc.id, history_id)
        await self._publish(
            "doc-restored",
            {"doc_id": doc.id, "restored_from": history_id},
        )
        return doc, entry
