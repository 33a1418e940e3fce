"""Tests for the document event publisher."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

from azure.servicebus.exceptions import ServiceBusError

from pika_docs.config import ServiceBusConfig
from pika_docs.events import EventEnvelope, EventPublisher, ServiceBusPublisher

_CONNECTION_STRING = (
    "Endpoint=sb://test.servicebus.windows.net/;SharedAccessKeyName=key;SharedAccessKey=abc"
)


def _config(connection_string: str = _CONNECTION_STRING) -> ServiceBusConfig:
    return ServiceBusConfig(connection_string=connection_string, topic_name="document-events")


def test_publisher_satisfies_protocol() -> None:
    assert isinstance(ServiceBusPublisher(_config("")), EventPublisher)


async def test_disabled_without_connection_string() -> None:
    publisher = ServiceBusPublisher(_config(""))

    with patch("pika_docs.events.servicebus.ServiceBusClient") as client_cls:
        await publisher.publish("doc-saved", {"doc_id": "doc-1"})

    client_cls.from_connection_string.assert_not_called()


async def test_publish_sends_envelope() -> None:
    sender = MagicMock()
    sender.send_messages = AsyncMock()
    sender.close = AsyncMock()
    client = MagicMock()
    client.get_topic_sender.return_value = sender
    client.close = AsyncMock()

    with patch("pika_docs.events.servicebus.ServiceBusClient") as client_cls:
        client_cls.from_connection_string.return_value = client
        publisher = ServiceBusPublisher(_config())
        await publisher.publish("doc-submitted", {"doc_id": "doc-1"})
        await publisher.close()

    client.get_topic_sender.assert_called_once_with(topic_name="document-events")
    message = sender.send_messages.await_args.args[0]
    body = b"".join(message.body).decode()
    assert EventEnvelope.model_validate_json(body) == EventEnvelope(
        event="doc-submitted", data={"doc_id": "doc-1"}
    )
    assert message.application_properties == {"event_type": "doc-submitted"}
    sender.close.assert_awaited_once()
    client.close.assert_awaited_once()


async def test_publish_failure_is_logged_not_raised() -> None:
    sender = MagicMock()
    sender.send_messages = AsyncMock(side_effect=ServiceBusError("down"))
    client = MagicMock()
    client.get_topic_sender.return_value = sender

    with patch("pika_docs.events.servicebus.ServiceBusClient") as client_cls:
        client_cls.from_connection_string.return_value = client
        await ServiceBusPublisher(_config()).publish("doc-saved", {"doc_id": "doc-1"})

    sender.send_messages.assert_awaited_once()

