"""Tests for the Cosmos DB client lifecycle."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pika_docs.config import CosmosConfig
from pika_docs.database.client import CosmosClient

_CONFIG = CosmosConfig(endpoint="https://localhost:8081", key="key", database="pika")


def test_database_before_initialize_raises() -> None:
    with pytest.raises(RuntimeError, match="initialize"):
        _ = CosmosClient(_CONFIG).database


async def test_initialize_and_close() -> None:
    azure_client = MagicMock()
    azure_client.close = AsyncMock()

    with patch("pika_docs.database.client.AzureCosmosClient", return_value=azure_client) as cls:
        client = CosmosClient(_CONFIG)
        await client.initialize()

        assert client.database is azure_client.get_database_client.return_value
        cls.assert_called_once_with("https://localhost:8081", credential="key")
        azure_client.get_database_client.assert_called_once_with("pika")

        await client.close()

    azure_client.close.assert_awaited_once()
    with pytest.raises(RuntimeError):
        _ = client.database
