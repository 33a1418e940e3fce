"""Repository for the assignment_docs container (partitioned by /id)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from azure.core import MatchConditions
from azure.cosmos.exceptions import CosmosHttpResponseError

from pika_docs.database.repositories.base import BaseRepository
from pika_docs.errors import NotFoundError, TransientPersistenceError
from pika_docs.models.assignment_doc import AssignmentDoc

if TYPE_CHECKING:
    from pika_docs.models.content import Content

_HTTP_NOT_FOUND = 404
_HTTP_PRECONDITION_FAILED = 412
_MAX_WRITE_ATTEMPTS = 5


class AssignmentDocRepository(BaseRepository[AssignmentDoc]):
    """Provide data access for students' assignment responses."""

    container_name = "assignment_docs"
    model_class = AssignmentDoc

    async def get_for_student(self, assignment_id: str, student_id: str) -> AssignmentDoc | None:
        """Fetch the single response a student has for an assignment."""
        docs = await self.query(
            "SELECT * FROM c WHERE c.assignment_id = @assignment_id"
            " AND c.student_id = @student_id"
            " AND NOT IS_DEFINED(c.deleted_at)",
            [
                {"name": "@assignment_id", "value": assignment_id},
                {"name": "@student_id", "value": student_id},
            ],
        )
        return docs[0] if docs else None

    async def store_content(
        self, doc_id: str, content: Content, history_sequence: int
    ) -> AssignmentDoc:
        """Write the content recorded by history entry ``history_sequence``.

        The replace is conditional on the stored etag. A document that already
        reflects a later history entry is returned unchanged, so the stored
        content always matches the newest entry regardless of write order.
        """
        for _ in range(_MAX_WRITE_ATTEMPTS):
            try:
                data = cast(
                    "dict[str, Any]",
                    await self._container.read_item(item=doc_id, partition_key=doc_id),
                )
            except CosmosHttpResponseError as exc:
                if exc.status_code == _HTTP_NOT_FOUND:
                    raise NotFoundError("Assignment doc not found") from exc
                raise

            current = self._to_model(data)
            if current.history_sequence >= history_sequence:
                return current

            current.content = content
            current.history_sequence = history_sequence
            current.touch()
            try:
                written = await self._container.replace_item(
                    item=doc_id,
                    body=current.model_dump(mode="json", exclude_none=True),
                    etag=data.get("_etag"),
                    match_condition=MatchConditions.IfNotModified,
                )
            except CosmosHttpResponseError as exc:
                if exc.status_code == _HTTP_PRECONDITION_FAILED:
                    continue
                raise
            return self._to_model(written)

        raise TransientPersistenceError("Document changed while saving, try again")
