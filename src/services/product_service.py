"""Product service: paginated listing, creation, replacement and deletion.

Products live in a single Cosmos DB container partitioned by id, so every
point operation uses the product id as its partition key.
"""

import logging
import math

from azure.cosmos.exceptions import CosmosResourceNotFoundError

from ..clients import CosmosDBClient
from ..models import Product, ProductId, ProductInput, ProductPage

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 0
DEFAULT_PER_PAGE = 10


class ProductNotFoundError(Exception):
    """Raised when an id does not resolve to a stored product."""

    def __init__(self, product_id: ProductId):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class ProductService:
    """CRUD operations over the products container."""

    def __init__(self, client: CosmosDBClient):
        """Initialize the product service.

        Args:
            client: Cosmos DB client bound to the products container.
        """
        self._client = client

    async def list_products(
        self,
        page: int = DEFAULT_PAGE,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> ProductPage:
        """Return one page of products in natural order.

        Args:
            page: Zero-based page index.
            per_page: Page size, at least 1.

        Returns:
            ProductPage whose `total` counts the whole container.
        """
        documents = await self._client.list_items(offset=page * per_page, limit=per_page)
        total = await self._client.count_items()

        return ProductPage(
            items=[Product.from_document(doc) for doc in documents],
            total=total,
            page=page,
            per_page=per_page,
            total_pages=math.ceil(total / per_page),
        )

    async def create_product(self, payload: ProductInput) -> Product:
        """Store a new product under a freshly generated id."""
        document = payload.to_document()
        document["id"] = str(ProductId.new())

        created = await self._client.create_item(document)
        logger.info(f"Created product {created['id']}")
        return Product.from_document(created)

    async def get_product(self, product_id: ProductId) -> Product:
        """Look a product up by id.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        try:
            document = await self._client.read_item(str(product_id), str(product_id))
        except CosmosResourceNotFoundError:
            raise ProductNotFoundError(product_id)
        return Product.from_document(document)

    async def update_product(self, product_id: ProductId, payload: ProductInput) -> Product:
        """Replace all four product fields; omitted optional fields are removed.

        The existence check comes first so an update that changes nothing
        still counts as a success.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        await self.get_product(product_id)

        document = payload.to_document()
        document["id"] = str(product_id)
        try:
            replaced = await self._client.replace_item(str(product_id), document)
        except CosmosResourceNotFoundError:
            # Deleted between the lookup and the replace
            raise ProductNotFoundError(product_id)

        logger.info(f"Updated product {product_id}")
        return Product.from_document(replaced)

    async def delete_product(self, product_id: ProductId) -> None:
        """Delete a product.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        await self.get_product(product_id)

        try:
            await self._client.delete_item(str(product_id), str(product_id))
        except CosmosResourceNotFoundError:
            raise ProductNotFoundError(product_id)

        logger.info(f"Deleted product {product_id}")
