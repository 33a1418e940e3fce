"""Enrollment document model: membership of a student in a classroom."""

from __future__ import annotations

from pika_docs.models.base import DocumentBase


class Enrollment(DocumentBase):
    classroom_id: str
    student_id: str
