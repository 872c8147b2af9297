"""Product models for request validation, storage and responses."""

import uuid
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = Union[int, float]
Price = Union[int, float, str]

PRODUCT_FIELDS = ("image", "name", "price", "rating")


class InvalidProductIdError(ValueError):
    """Raised when a path identifier is not a valid product id."""
    pass


@dataclass(frozen=True)
class ProductId:
    """Identifier of a stored product (canonical UUID string)."""

    value: str

    @classmethod
    def new(cls) -> "ProductId":
        return cls(str(uuid.uuid4()))

    @classmethod
    def parse(cls, raw: str) -> "ProductId":
        """Parse a client-supplied id.

        Raises:
            InvalidProductIdError: If the value is not a well-formed id.
        """
        try:
            return cls(str(uuid.UUID(raw.strip())))
        except (AttributeError, ValueError):
            raise InvalidProductIdError(f"Invalid product id: {raw!r}")

    def __str__(self) -> str:
        return self.value


class ProductInput(BaseModel):
    """Create/update payload. `name` and `price` must be present and truthy."""

    image: Optional[str] = None
    name: Optional[str] = Field(default=None, validate_default=True)
    price: Optional[Price] = Field(default=None, validate_default=True)
    rating: Optional[Number] = None

    @field_validator("name", "price")
    @classmethod
    def require_truthy(cls, value, info):
        if not value:
            raise ValueError(f"{info.field_name} is required")
        return value

    def to_document(self) -> dict[str, Any]:
        """Fields to persist; absent optional fields are left out."""
        return self.model_dump(include=set(PRODUCT_FIELDS), exclude_none=True)


class Product(BaseModel):
    """A stored product as returned to clients.

    Storage accepts partial documents, so everything except the id is optional.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    image: Optional[str] = None
    name: Optional[str] = None
    price: Optional[Price] = None
    rating: Optional[Number] = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Product":
        # Drop Cosmos system properties (_rid, _self, _etag, _attachments, _ts)
        return cls.model_validate(
            {k: v for k, v in document.items() if not k.startswith("_")}
        )


class ProductPage(BaseModel):
    """One page of products plus pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    items: List[Product]
    total: int
    page: int
    per_page: int = Field(alias="perPage")
    total_pages: int = Field(alias="totalPages")


class ProductUpdateResponse(BaseModel):
    message: str
    product: ProductInput


class ErrorResponse(BaseModel):
    """Envelope for every non-2xx response."""

    message: str
