"""Integration tests for the Cosmos DB client and product service.

These tests require actual Cosmos DB credentials and connectivity.
They verify:
- CosmosDBClient connection and item operations
- ProductService round trip against a real container
- Database and container auto-creation
"""

import uuid

import pytest
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from src.clients.cosmosdb_client import CosmosDBClient
from src.config.configuration import ConfigurationError, get_config
from src.models import ProductId, ProductInput
from src.services import ProductNotFoundError, ProductService


def cosmos_credentials_available() -> bool:
    """Check if Cosmos DB credentials are available."""
    try:
        config = get_config()
        return bool(config.cosmosdb.endpoint and config.cosmosdb.key)
    except ConfigurationError:
        return False


# Skip all tests if credentials not available
pytestmark = pytest.mark.skipif(
    not cosmos_credentials_available(),
    reason="Cosmos DB credentials not configured (COSMOSDB_ENDPOINT, COSMOSDB_KEY)",
)


@pytest.fixture
async def cosmos_client():
    """Create a CosmosDBClient bound to a throwaway container."""
    config = get_config()
    container_name = f"test-products-{uuid.uuid4().hex[:8]}"
    client = CosmosDBClient(
        endpoint=config.cosmosdb.endpoint,
        key=config.cosmosdb.key,
        database_name=config.cosmosdb.database_name,
        container_name=container_name,
        partition_key_path="/id",
    )
    await client.ensure_connected()
    yield client
    # Cleanup: delete test container
    try:
        await client._database.delete_container(container_name)
    except CosmosResourceNotFoundError:
        pass
    await client.close()


class TestCosmosDBClient:
    """Test CosmosDBClient item operations."""

    @pytest.mark.asyncio
    async def test_client_connection(self, cosmos_client):
        assert cosmos_client.is_connected
        assert cosmos_client._database is not None

    @pytest.mark.asyncio
    async def test_create_read_delete(self, cosmos_client):
        created = await cosmos_client.create_item({"name": "Shirt", "price": 10})

        read = await cosmos_client.read_item(created["id"], created["id"])
        assert read["name"] == "Shirt"

        await cosmos_client.delete_item(created["id"], created["id"])
        with pytest.raises(CosmosResourceNotFoundError):
            await cosmos_client.read_item(created["id"], created["id"])

    @pytest.mark.asyncio
    async def test_list_and_count(self, cosmos_client):
        for i in range(5):
            await cosmos_client.create_item({"name": f"Item {i}", "price": i + 1})

        assert await cosmos_client.count_items() == 5
        assert len(await cosmos_client.list_items(offset=3, limit=10)) == 2


class TestProductServiceIntegration:
    """Test ProductService end to end on Cosmos DB."""

    @pytest.mark.asyncio
    async def test_product_lifecycle(self, cosmos_client):
        service = ProductService(cosmos_client)

        created = await service.create_product(ProductInput(name="Shirt", price=10))
        product_id = ProductId.parse(created.id)

        updated = await service.update_product(product_id, ProductInput(name="X", price=5))
        assert (updated.name, updated.price) == ("X", 5)

        page = await service.list_products(page=0, per_page=10)
        assert page.total == 1
        assert page.items[0].id == created.id

        await service.delete_product(product_id)
        with pytest.raises(ProductNotFoundError):
            await service.get_product(product_id)
