"""Teacher assignment routes: instructions autosave."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from pika_docs.auth.middleware import require_role
from pika_docs.database.repositories.assignments import AssignmentRepository
from pika_docs.models.history import InstructionsUpdate
from pika_docs.services import assignments as assignments_svc

router = APIRouter(prefix="/api/teacher/assignments", tags=["assignments"])


@router.patch("/{assignment_id}")
async def update_instructions(
    request: Request,
    assignment_id: str,
    body: InstructionsUpdate,
    user: Annotated[dict[str, Any], Depends(require_role("teacher"))],
) -> dict[str, Any]:
    """Save the assignment's instructions."""
    repo = AssignmentRepository(request.app.state.cosmos.database)
    assignment = await assignments_svc.update_instructions(
        user, assignment_id, body.instructions, repo
    )
    return {"assignment": assignment.model_dump(mode="json")}
