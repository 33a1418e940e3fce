"""Document lifecycle events and their publishers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pika_docs.events.contracts import EventEnvelope
from pika_docs.events.servicebus import ServiceBusPublisher


@runtime_checkable
class EventPublisher(Protocol):
    """Anything that can broadcast a document event."""

    async def publish(self, event_type: str, data: dict[str, Any]) -> None: ...


__all__ = [
    "EventEnvelope",
    "EventPublisher",
    "ServiceBusPublisher",
]
