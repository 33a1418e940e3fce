"""Repository for the enrollments container (partitioned by /classroom_id)."""

from __future__ import annotations

from pika_docs.database.repositories.base import BaseRepository
from pika_docs.models.enrollment import Enrollment


class EnrollmentRepository(BaseRepository[Enrollment]):
    container_name = "enrollments"
    model_class = Enrollment

    async def is_enrolled(self, classroom_id: str, student_id: str) -> bool:
        """Return True when the student belongs to the classroom."""
        rows = await self.query(
            "SELECT * FROM c WHERE c.classroom_id = @classroom_id"
            " AND c.student_id = @student_id"
            " AND NOT IS_DEFINED(c.deleted_at)",
            [
                {"name": "@classroom_id", "value": classroom_id},
                {"name": "@student_id", "value": student_id},
            ],
        )
        return bool(rows)
