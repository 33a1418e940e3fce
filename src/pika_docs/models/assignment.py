"""Assignment document model: a classroom task whose instructions are autosaved."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from pika_docs.models.base import DocumentBase
from pika_docs.models.content import Content, empty_content


class Assignment(DocumentBase):
    """An assignment created by a teacher in one classroom."""

    classroom_id: str
    teacher_id: str
    title: str = ""
    instructions: Content = Field(default_factory=empty_content)
    due_at: datetime | None = None
