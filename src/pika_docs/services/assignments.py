"""Assignment instructions, autosaved by the teacher who owns the assignment."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pika_docs.errors import AccessDeniedError, NotFoundError, ValidationError
from pika_docs.models.content import contents_equal, is_valid_content

if TYPE_CHECKING:
    from pika_docs.database.repositories.assignments import AssignmentRepository
    from pika_docs.models.assignment import Assignment
    from pika_docs.models.content import Content

logger = logging.getLogger(__name__)


async def update_instructions(
    user: dict[str, Any],
    assignment_id: str,
    instructions: Content,
    assignments_repo: AssignmentRepository,
) -> Assignment:
    """Replace an assignment's instructions. Unchanged content is not written."""
    if not is_valid_content(instructions):
        raise ValidationError("Instructions must be a document")
    if user.get("role") != "teacher":
        raise AccessDeniedError("Forbidden")

    assignment = await assignments_repo.get_by_id(assignment_id)
    if assignment is None:
        raise NotFoundError("Assignment not found")
    if assignment.teacher_id != user["id"]:
        raise AccessDeniedError("Unauthorized")
    if contents_equal(assignment.instructions, instructions):
        return assignment

    assignment.instructions = instructions
    assignment = await assignments_repo.update(assignment)
    logger.info("Instructions saved: assignment=%s", assignment_id)
    return assignment
