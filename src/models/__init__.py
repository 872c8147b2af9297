"""Data models module."""

from src.models.product import (
    ErrorResponse,
    InvalidProductIdError,
    Product,
    ProductId,
    ProductInput,
    ProductPage,
    ProductUpdateResponse,
)

__all__ = [
    "ErrorResponse",
    "InvalidProductIdError",
    "Product",
    "ProductId",
    "ProductInput",
    "ProductPage",
    "ProductUpdateResponse",
]
