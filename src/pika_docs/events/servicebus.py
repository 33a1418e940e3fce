"""Service Bus publisher for document lifecycle events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from azure.servicebus import ServiceBusMessage
from azure.servicebus.aio import ServiceBusClient, ServiceBusSender
from azure.servicebus.exceptions import ServiceBusError

from pika_docs.events.contracts import EventEnvelope

if TYPE_CHECKING:
    from pika_docs.config import ServiceBusConfig

logger = logging.getLogger(__name__)


class ServiceBusPublisher:
    """Publish document events to an Azure Service Bus topic.

    Without a connection string the publisher is disabled and ``publish``
    does nothing.
    """

    def __init__(self, config: ServiceBusConfig) -> None:
        self._config = config
        self._client: ServiceBusClient | None = None
        self._sender: ServiceBusSender | None = None
        self._disabled = not config.connection_string
        if self._disabled:
            logger.warning(
                "AZURE_SERVICEBUS_CONNECTION_STRING is not set, "
                "document events will not be published"
            )

    def _ensure_sender(self) -> ServiceBusSender:
        if self._sender is None:
            self._client = ServiceBusClient.from_connection_string(
                self._config.connection_string
            )
            self._sender = self._client.get_topic_sender(topic_name=self._config.topic_name)
        return self._sender

    async def publish(self, event_type: str, data: dict[str, Any]) -> None:
        """Send one event. Delivery failures are logged and never raised."""
        if self._disabled:
            return
        message = ServiceBusMessage(
            body=EventEnvelope(event=event_type, data=data).model_dump_json(),
            application_properties={"event_type": event_type},
        )
        try:
            await self._ensure_sender().send_messages(message)
        except (ServiceBusError, ValueError):
            logger.warning("Failed to publish event=%s", event_type, exc_info=True)
            return
        logger.debug("Published event=%s", event_type)

    async def close(self) -> None:
        if self._sender:
            await self._sender.close()
        if self._client:
            await self._client.close()
        self._sender = None
        self._client = None
