"""Service layer."""

from src.services.product_service import ProductNotFoundError, ProductService

__all__ = ["ProductNotFoundError", "ProductService"]
