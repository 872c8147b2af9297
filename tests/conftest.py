"""Shared fixtures: an in-memory stand-in for the products container."""

import uuid
from typing import Any, Optional

import httpx
import pytest
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from src.api import create_app
from src.services import ProductService


class InMemoryCosmosDBClient:
    """Implements the CosmosDBClient item operations over a dict.

    Documents come back with Cosmos-style system properties so tests can
    check they are stripped. Setting `failure` makes every call raise it.
    """

    def __init__(self):
        self.documents: dict[str, dict[str, Any]] = {}
        self.calls: list[str] = []
        self.failure: Optional[Exception] = None

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.failure is not None:
            raise self.failure

    def _stored(self, item_id: str) -> dict[str, Any]:
        return {**self.documents[item_id], "_etag": "etag", "_ts": 1700000000}

    def _not_found(self) -> CosmosResourceNotFoundError:
        return CosmosResourceNotFoundError(
            status_code=404,
            message="Entity with the specified id does not exist in the system.",
        )

    async def list_items(self, offset: int, limit: int) -> list[dict[str, Any]]:
        self._record("list_items")
        ids = list(self.documents)[offset:offset + limit]
        return [self._stored(item_id) for item_id in ids]

    async def count_items(self) -> int:
        self._record("count_items")
        return len(self.documents)

    async def create_item(self, item: dict[str, Any]) -> dict[str, Any]:
        self._record("create_item")
        item.setdefault("id", str(uuid.uuid4()))
        self.documents[item["id"]] = dict(item)
        return self._stored(item["id"])

    async def read_item(self, item_id: str, partition_key: str) -> dict[str, Any]:
        self._record("read_item")
        if item_id not in self.documents:
            raise self._not_found()
        return self._stored(item_id)

    async def replace_item(self, item_id: str, item: dict[str, Any]) -> dict[str, Any]:
        self._record("replace_item")
        if item_id not in self.documents:
            raise self._not_found()
        self.documents[item_id] = dict(item)
        return self._stored(item_id)

    async def delete_item(self, item_id: str, partition_key: str) -> None:
        self._record("delete_item")
        if item_id not in self.documents:
            raise self._not_found()
        del self.documents[item_id]

    async def close(self) -> None:
        pass


@pytest.fixture
def cosmos_client():
    """Empty in-memory products container."""
    return InMemoryCosmosDBClient()


@pytest.fixture
def product_service(cosmos_client):
    return ProductService(cosmos_client)


@pytest.fixture
def app(product_service):
    return create_app(product_service=product_service)


@pytest.fixture
async def http_client(app):
    """HTTP client talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
