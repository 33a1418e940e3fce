"""Connection to the Cosmos DB account that stores assignments and their docs."""

from __future__ import annotations

import logging

from azure.cosmos.aio import CosmosClient as AzureCosmosClient
from azure.cosmos.aio import DatabaseProxy

from pika_docs.config import CosmosConfig

logger = logging.getLogger(__name__)


class CosmosClient:
    """Holds the account client and the database the repositories read from."""

    def __init__(self, config: CosmosConfig) -> None:
        self._config = config
        self._client: AzureCosmosClient | None = None
        self._database: DatabaseProxy | None = None

    async def initialize(self) -> None:
        self._client = AzureCosmosClient(self._config.endpoint, credential=self._config.key)
        self._database = self._client.get_database_client(self._config.database)
        logger.info("Cosmos DB ready: database=%s", self._config.database)

    async def close(self) -> None:
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None

    @property
    def database(self) -> DatabaseProxy:
        if self._database is None:
            raise RuntimeError("Cosmos DB database requested before initialize()")
        return self._database
