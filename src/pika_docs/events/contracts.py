"""Typed envelope for document lifecycle events."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class EventEnvelope(BaseModel):
    """Message body published for every document event."""

    event: str
    data: dict[str, Any]
