"""Assignment doc model: one student's editable response to an assignment."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from pika_docs.models.base import DocumentBase
from pika_docs.models.content import Content, empty_content, parse_content_field


class AssignmentDoc(DocumentBase):
    """The response document for one (assignment, student) pair."""

    assignment_id: str
    student_id: str
    content: Content = Field(default_factory=empty_content)
    is_submitted: bool = False
    submitted_at: datetime | None = None
    graded_at: datetime | None = None
    returned_at: datetime | None = None
    # Sequence of the history entry the stored content came from.
    history_sequence: int = 0

    @field_validator("content", mode="before")
    @classmethod
    def _parse_content(cls, value: object) -> Content:
        return parse_content_field(value)

    @property
    def is_editable(self) -> bool:
        """Submitted documents are locked until they are unsubmitted."""
        return not self.is_submitted
