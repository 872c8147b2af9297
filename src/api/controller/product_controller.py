"""REST controller for the product collection."""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Query, Request, Response, status
from fastapi.responses import JSONResponse

from src.models import (
    ErrorResponse,
    InvalidProductIdError,
    Product,
    ProductId,
    ProductInput,
    ProductPage,
    ProductUpdateResponse,
)
from src.services import ProductNotFoundError, ProductService
from src.services.product_service import DEFAULT_PAGE, DEFAULT_PER_PAGE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clothes", tags=["products"])

LEADING_INT = re.compile(r"\s*[+-]?\d+")

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def parse_or_default(value: Optional[str], default: int, minimum: int) -> int:
    """Read the leading integer of a query value ("2.5" → 2, "5abc" → 5).

    Falls back to default when there is no leading integer or it is below minimum.
    """
    match = LEADING_INT.match(value) if value is not None else None
    if match is None:
        return default
    parsed = int(match.group(0))
    return parsed if parsed >= minimum else default


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service


@router.get("", response_model=ProductPage, response_model_exclude_none=True, responses=ERROR_RESPONSES)
async def list_products(
    request: Request,
    page: Optional[str] = None,
    per_page: Optional[str] = Query(default=None, alias="perPage"),
):
    """List one page of products.

    Invalid or out-of-range `page`/`perPage` values fall back to 0 and 10.
    """
    page_number = parse_or_default(page, DEFAULT_PAGE, minimum=0)
    page_size = parse_or_default(per_page, DEFAULT_PER_PAGE, minimum=1)

    try:
        return await get_product_service(request).list_products(page_number, page_size)
    except Exception as e:
        logger.exception(f"Failed to fetch products: {e}")
        return error_response(500, f"Failed to fetch products. Error: {e}")


@router.post(
    "",
    response_model=Product,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_product(request: Request, payload: ProductInput):
    """Create a product; the generated id is part of the response."""
    try:
        return await get_product_service(request).create_product(payload)
    except Exception as e:
        logger.exception(f"Failed to add product: {e}")
        return error_response(500, f"Failed to add product. Error: {e}")


@router.put(
    "/{product_id}",
    response_model=ProductUpdateResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def update_product(request: Request, product_id: str, payload: ProductInput):
    """Replace a product's fields with the submitted payload."""
    try:
        parsed_id = ProductId.parse(product_id)
    except InvalidProductIdError as e:
        return error_response(400, str(e))

    try:
        await get_product_service(request).update_product(parsed_id, payload)
    except ProductNotFoundError:
        return error_response(404, "Product not found")
    except Exception as e:
        logger.exception(f"Failed to update product: {e}")
        return error_response(500, f"Failed to update product. Error: {e}")

    return ProductUpdateResponse(
        message=f"Product with id {parsed_id} updated",
        product=payload,
    )


@router.delete("", status_code=status.HTTP_400_BAD_REQUEST, include_in_schema=False)
@router.delete("/", status_code=status.HTTP_400_BAD_REQUEST, include_in_schema=False)
async def delete_product_without_id():
    return error_response(400, "Missing id")


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
async def delete_product(request: Request, product_id: str):
    """Delete a product by id."""
    logger.info(f"delete: {product_id}")
    if not product_id.strip():
        return error_response(400, "Missing id")

    try:
        parsed_id = ProductId.parse(product_id)
    except InvalidProductIdError as e:
        return error_response(400, str(e))

    try:
        await get_product_service(request).delete_product(parsed_id)
    except ProductNotFoundError:
        return error_response(404, "Product not found")
    except Exception as e:
        logger.exception(f"Failed to delete product: {e}")
        return error_response(500, f"Failed to delete product. Error: {e}")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
