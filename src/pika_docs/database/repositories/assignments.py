"""Repository for the assignments container (partitioned by /id)."""

from __future__ import annotations

from pika_docs.database.repositories.base import BaseRepository
from pika_docs.models.assignment import Assignment


class AssignmentRepository(BaseRepository[Assignment]):
    container_name = "assignments"
    model_class = Assignment

    async def get_by_id(self, assignment_id: str) -> Assignment | None:
        return await self.get(assignment_id, assignment_id)
