"""Generic repository over one Cosmos DB container."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, cast

from azure.cosmos.exceptions import CosmosResourceNotFoundError

from pika_docs.models.base import DocumentBase

if TYPE_CHECKING:
    from azure.cosmos.aio import DatabaseProxy

T = TypeVar("T", bound=DocumentBase)


class BaseRepository(Generic[T]):
    """CRUD and parameterized queries for a container of ``model_class`` documents.

    Soft-deleted documents (``deleted_at`` set) are invisible to ``get``.
    """

    container_name: ClassVar[str]
    model_class: ClassVar[type[DocumentBase]]

    def __init__(self, database: DatabaseProxy) -> None:
        self._container = database.get_container_client(self.container_name)

    def _to_model(self, data: dict[str, Any]) -> T:
        return cast("T", self.model_class.model_validate(data))

    async def get(self, item_id: str, partition_key: str) -> T | None:
        """Read one document by id, or None when missing or soft-deleted."""
        try:
            data = await self._container.read_item(item=item_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            return None
        if data.get("deleted_at") is not None:
            return None
        return self._to_model(data)

    async def create(self, item: T) -> T:
        data = await self._container.create_item(
            body=item.model_dump(mode="json", exclude_none=True)
        )
        return self._to_model(data)

    async def update(self, item: T) -> T:
        """Replace a stored document and refresh its ``updated_at``."""
        item.touch()
        data = await self._container.upsert_item(
            body=item.model_dump(mode="json", exclude_none=True)
        )
        return self._to_model(data)

    async def query(
        self,
        sql: str,
        parameters: list[dict[str, Any]] | None = None,
    ) -> list[T]:
        """Run a cross-partition query and validate every row."""
        items = self._container.query_items(query=sql, parameters=parameters or [])
        return [self._to_model(item) async for item in items]
