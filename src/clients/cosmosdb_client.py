"""Azure Cosmos DB client for the product container."""

import asyncio
import logging
import uuid
from typing import Any, Optional

from azure.cosmos.aio import CosmosClient
from azure.cosmos.aio._container import ContainerProxy
from azure.cosmos.aio._database import DatabaseProxy
from azure.cosmos.exceptions import CosmosResourceNotFoundError

logger = logging.getLogger(__name__)

COUNT_QUERY = "SELECT VALUE COUNT(1) FROM c"
PAGE_QUERY = "SELECT * FROM c OFFSET @offset LIMIT @limit"


class CosmosDBClient:
    """Async Cosmos DB client with connection management.

    Uses the NoSQL API. The client is constructed once per process and
    connects lazily on first use; concurrent first callers share a single
    connection attempt. Supports the async context manager pattern for
    proper resource cleanup.
    """

    def __init__(
        self,
        endpoint: str,
        key: str,
        database_name: str,
        container_name: str,
        partition_key_path: str = "/id",
        timeout_seconds: Optional[float] = None,
    ):
        """Initialize the Cosmos DB client.

        Args:
            endpoint: Cosmos DB account endpoint URL
            key: Cosmos DB account key
            database_name: Name of the database to use
            container_name: Name of the container to use
            partition_key_path: Path to the partition key field (default: /id)
            timeout_seconds: Upper bound for a single storage call, None for no limit
        """
        self._endpoint = endpoint
        self._key = key
        self._database_name = database_name
        self._container_name = container_name
        self._partition_key_path = partition_key_path
        self._timeout_seconds = timeout_seconds

        self._client: Optional[CosmosClient] = None
        self._database: Optional[DatabaseProxy] = None
        self._container: Optional[ContainerProxy] = None
        self._connect_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._container is not None

    async def connect(self) -> None:
        """Establish connection and ensure database/container exist."""
        self._client = CosmosClient(url=self._endpoint, credential=self._key)

        try:
            await self._client.__aenter__()

            # Get or create database
            try:
                self._database = self._client.get_database_client(self._database_name)
                # Verify database exists by reading it
                await self._database.read()
            except CosmosResourceNotFoundError:
                self._database = await self._client.create_database(self._database_name)

            # Get or create container
            try:
                container = self._database.get_container_client(self._container_name)
                # Verify container exists by reading it
                await container.read()
            except CosmosResourceNotFoundError:
                container = await self._database.create_container(
                    id=self._container_name,
                    partition_key={"paths": [self._partition_key_path], "kind": "Hash"},
                )
        except Exception:
            logger.exception("Cosmos DB connection failed")
            await self.close()
            raise

        # Published last so a half-initialized client is never observed as connected
        self._container = container
        logger.info(
            f"Connected to Cosmos DB database '{self._database_name}', "
            f"container '{self._container_name}'"
        )

    async def ensure_connected(self) -> None:
        """Connect once, even when called concurrently before the first connection."""
        if self._container is not None:
            return
        async with self._connect_lock:
            if self._container is None:
                await self.connect()

    async def close(self) -> None:
        """Close the Cosmos DB connection."""
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None
            self._container = None

    async def __aenter__(self) -> "CosmosDBClient":
        """Async context manager entry."""
        await self.ensure_connected()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Async context manager exit with cleanup."""
        await self.close()
        return False

    async def _get_container(self) -> ContainerProxy:
        await self.ensure_connected()
        return self._container

    async def _bounded(self, awaitable):
        if self._timeout_seconds is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout_seconds)
        except asyncio.TimeoutError:
            raise TimeoutError(f"Cosmos DB call exceeded {self._timeout_seconds}s")

    async def create_item(self, item: dict[str, Any]) -> dict[str, Any]:
        """Insert a new item into the container.

        Args:
            item: Dictionary containing the item data. An 'id' field is
                  generated when absent.

        Returns:
            The created item with any system-generated fields.
        """
        container = await self._get_container()

        if "id" not in item:
            item["id"] = str(uuid.uuid4())

        result = await self._bounded(container.create_item(body=item))
        return dict(result)

    async def query_items(
        self,
        query: str,
        parameters: Optional[list[dict[str, Any]]] = None,
        partition_key: Optional[str] = None,
    ) -> list[Any]:
        """Query items from the container.

        Args:
            query: SQL query string
            parameters: Optional query parameters as list of {"name": "@param", "value": value}
            partition_key: Optional partition key to scope the query

        Returns:
            List of matching items (or scalar values for SELECT VALUE queries).
        """
        container = await self._get_container()

        query_options = {}
        if partition_key is not None:
            query_options["partition_key"] = partition_key

        async def collect() -> list[Any]:
            items = []
            async for item in container.query_items(
                query=query,
                parameters=parameters,
                **query_options,
            ):
                items.append(dict(item) if isinstance(item, dict) else item)
            return items

        return await self._bounded(collect())

    async def list_items(self, offset: int, limit: int) -> list[dict[str, Any]]:
        """Read one window of items in the container's natural order."""
        return await self.query_items(
            PAGE_QUERY,
            parameters=[
                {"name": "@offset", "value": offset},
                {"name": "@limit", "value": limit},
            ],
        )

    async def count_items(self) -> int:
        """Count every item in the container."""
        result = await self.query_items(COUNT_QUERY)
        return int(result[0]) if result else 0

    async def read_item(self, item_id: str, partition_key: str) -> dict[str, Any]:
        """Read a single item by id and partition key.

        Raises:
            CosmosResourceNotFoundError: If item not found.
        """
        container = await self._get_container()
        result = await self._bounded(
            container.read_item(item=item_id, partition_key=partition_key)
        )
        return dict(result)

    async def replace_item(self, item_id: str, item: dict[str, Any]) -> dict[str, Any]:
        """Replace an existing item wholesale.

        Raises:
            CosmosResourceNotFoundError: If item not found.
        """
        container = await self._get_container()
        result = await self._bounded(container.replace_item(item=item_id, body=item))
        return dict(result)

    async def delete_item(self, item_id: str, partition_key: str) -> None:
        """Delete an item by id and partition key.

        Raises:
            CosmosResourceNotFoundError: If item not found.
        """
        container = await self._get_container()
        await self._bounded(
            container.delete_item(item=item_id, partition_key=partition_key)
        )
