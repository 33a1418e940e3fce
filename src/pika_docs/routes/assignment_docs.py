"""Assignment doc routes: a student's response, its history and restores."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from pika_docs.auth.middleware import require_authenticated_user
from pika_docs.models.history import RestoreRequest, SaveRequest
from pika_docs.services.assignment_docs import AssignmentDocService

router = APIRouter(prefix="/api/assignment-docs", tags=["assignment-docs"])

User = Annotated[dict[str, Any], Depends(require_authenticated_user)]


def _service(request: Request) -> AssignmentDocService:
    state = request.app.state
    return AssignmentDocService(
        state.cosmos.database,
        state.event_publisher,
        snapshot_interval=state.settings.history.snapshot_interval,
    )


Service = Annotated[AssignmentDocService, Depends(_service)]


@router.get("/{assignment_id}")
async def get_doc(assignment_id: str, user: User, service: Service) -> dict[str, Any]:
    """Return the assignment and the student's doc, creating the doc if needed."""
    assignment, doc = await service.open(user, assignment_id)
    return {"assignment": assignment.model_dump(mode="json"), "doc": doc.model_dump(mode="json")}


@router.patch("/{assignment_id}")
async def save_doc(
    assignment_id: str, body: SaveRequest, user: User, service: Service
) -> dict[str, Any]:
    """Autosave the student's content."""
    doc, entry = await service.save(user, assignment_id, body.content, body.trigger)
    return {
        "doc": doc.model_dump(mode="json"),
        "history_entry": entry.model_dump(mode="json") if entry else None,
    }


@router.post("/{assignment_id}/submit")
async def submit_doc(assignment_id: str, user: User, service: Service) -> dict[str, Any]:
    doc = await service.submit(user, assignment_id)
    return {"doc": doc.model_dump(mode="json")}


@router.post("/{assignment_id}/unsubmit")
async def unsubmit_doc(assignment_id: str, user: User, service: Service) -> dict[str, Any]:
    doc = await service.unsubmit(user, assignment_id)
    return {"doc": doc.model_dump(mode="json")}


@router.get("/{assignment_id}/history")
async def list_history(
    assignment_id: str,
    user: User,
    service: Service,
    student_id: str | None = None,
) -> dict[str, Any]:
    """History entries newest first. Teachers pass ``student_id``."""
    entries, doc_id = await service.list_history(user, assignment_id, student_id)
    return {"history": [entry.model_dump(mode="json") for entry in entries], "doc_id": doc_id}


@router.post("/{assignment_id}/restore")
async def restore_doc(
    assignment_id: str, body: RestoreRequest, user: User, service: Service
) -> dict[str, Any]:
    """Restore the doc to a past history entry."""
    doc, entry = await service.restore(user, assignment_id, body.history_id)
    return {
        "doc": doc.model_dump(mode="json"),
        "history_entry": entry.model_dump(mode="json") if entry else None,
    }
