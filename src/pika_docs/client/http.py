"""HTTP persistence clients for the assignment-docs and teacher assignment APIs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from pika_docs.client.base import SaveResult
from pika_docs.errors import (
    AccessDeniedError,
    DocumentLockedError,
    NotFoundError,
    StaleReferenceError,
    TransientPersistenceError,
    ValidationError,
)
from pika_docs.models.assignment import Assignment
from pika_docs.models.assignment_doc import AssignmentDoc
from pika_docs.models.history import HistoryEntry

if TYPE_CHECKING:
    from pika_docs.config import ApiConfig
    from pika_docs.errors import PersistenceError
    from pika_docs.models.content import Content
    from pika_docs.models.history import SaveTrigger

logger = logging.getLogger(__name__)

_LOCKED_MARKER = "submitted"


def create_http_client(config: ApiConfig, **kwargs: Any) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` bound to the API base URL."""
    return httpx.AsyncClient(base_url=config.base_url, timeout=config.timeout, **kwargs)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if isinstance(detail, str):
            return detail
    return response.reason_phrase


def _raise_for_status(response: httpx.Response, *, stale_on_404: bool = False) -> None:
    """Translate an error response into the persistence error taxonomy."""
    if response.is_success:
        return
    message = _error_message(response)
    status = response.status_code
    error: PersistenceError
    if status in (400, 422):
        error = ValidationError(message)
    elif status == 403 and _LOCKED_MARKER in message.lower():
        error = DocumentLockedError(message)
    elif status in (401, 403):
        error = AccessDeniedError(message)
    elif status == 404:
        error = StaleReferenceError(message) if stale_on_404 else NotFoundError(message)
    else:
        error = TransientPersistenceError(message)
    raise error


class _JsonApi:
    """Shared request plumbing: network failures become transient errors."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _request(
        self,
        method: str,
        url: str,
        *,
        stale_on_404: bool = False,
        **kwargs: Any,
    ) -> dict[str, Any]:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Request failed: %s %s error=%s", method, url, exc)
            raise TransientPersistenceError(str(exc) or type(exc).__name__) from exc
        _raise_for_status(response, stale_on_404=stale_on_404)
        return response.json()


class HttpAssignmentDocClient(_JsonApi):
    """Persistence client for a student's response to one assignment.

    With ``student_id`` the client reads another student's history, as the
    assignment's teacher does for a read-only review.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        assignment_id: str,
        *,
        student_id: str | None = None,
    ) -> None:
        if not assignment_id:
            raise ValidationError("assignment_id is required")
        super().__init__(http)
        self._base = f"/api/assignment-docs/{assignment_id}"
        self._student_id = student_id

    async def load(self) -> AssignmentDoc:
        data = await self._request("GET", self._base)
        return AssignmentDoc.model_validate(data["doc"])

    async def save(self, content: Content, trigger: SaveTrigger) -> SaveResult:
        data = await self._request(
            "PATCH", self._base, json={"content": content, "trigger": str(trigger)}
        )
        return _save_result(data)

    async def submit(self) -> AssignmentDoc:
        data = await self._request("POST", f"{self._base}/submit")
        return AssignmentDoc.model_validate(data["doc"])

    async def unsubmit(self) -> AssignmentDoc:
        data = await self._request("POST", f"{self._base}/unsubmit")
        return AssignmentDoc.model_validate(data["doc"])

    async def list_history(self) -> list[HistoryEntry]:
        params = {"student_id": self._student_id} if self._student_id else None
        data = await self._request("GET", f"{self._base}/history", params=params)
        return [HistoryEntry.model_validate(item) for item in data.get("history") or []]

    async def restore(self, history_entry_id: str) -> SaveResult:
        if not history_entry_id:
            raise ValidationError("history_id is required")
        data = await self._request(
            "POST",
            f"{self._base}/restore",
            json={"history_id": history_entry_id},
            stale_on_404=True,
        )
        return _save_result(data)


class HttpInstructionsClient(_JsonApi):
    """Persistence callback for a teacher's assignment instructions."""

    def __init__(self, http: httpx.AsyncClient, assignment_id: str) -> None:
        if not assignment_id:
            raise ValidationError("assignment_id is required")
        super().__init__(http)
        self._url = f"/api/teacher/assignments/{assignment_id}"

    async def save(self, content: Content, trigger: SaveTrigger) -> Assignment:
        logger.debug("Saving instructions: url=%s trigger=%s", self._url, trigger)
        data = await self._request("PATCH", self._url, json={"instructions": content})
        return Assignment.model_validate(data["assignment"])


def _save_result(data: dict[str, Any]) -> SaveResult:
    entry = data.get("history_entry")
    return SaveResult(
        doc=AssignmentDoc.model_validate(data["doc"]),
        history_entry=HistoryEntry.model_validate(entry) if entry else None,
    )
