"""FastAPI application setup."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.controller import product_router
from src.clients import CosmosDBClient
from src.config import get_config
from src.services import ProductService

logger = logging.getLogger(__name__)

MISSING_ERROR_TYPES = ("missing", "value_error")


def validation_message(exc: RequestValidationError) -> str:
    """Summarize body validation errors as a single client-facing message."""
    missing: list[str] = []
    invalid: list[str] = []
    body_missing = False

    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) < 2 or not isinstance(loc[1], str):
            body_missing = body_missing or error.get("type") == "missing"
            continue
        target = missing if error.get("type") in MISSING_ERROR_TYPES else invalid
        if loc[1] not in target:
            target.append(loc[1])

    parts = []
    if missing:
        parts.append(f"Missing required field(s): {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid field(s): {', '.join(invalid)}")
    if not parts:
        return "Missing required field(s)" if body_missing else "Invalid request body"
    return "; ".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": validation_message(exc)},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared Cosmos DB client unless one was injected; close it on shutdown."""
    client: Optional[CosmosDBClient] = None
    if getattr(app.state, "product_service", None) is None:
        cosmos = get_config().cosmosdb
        client = CosmosDBClient(
            endpoint=cosmos.endpoint,
            key=cosmos.key,
            database_name=cosmos.database_name,
            container_name=cosmos.container_name,
            partition_key_path=cosmos.partition_key_path,
            timeout_seconds=cosmos.timeout_seconds,
        )
        app.state.product_service = ProductService(client)

    yield

    if client is not None:
        await client.close()
        logger.info("Cosmos DB connection closed")


def create_app(
    product_service: Optional[ProductService] = None,
    allow_origins: Optional[list[str]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        product_service: Service to serve requests with. When omitted, one is
            built from configuration at startup.
        allow_origins: CORS origins, every origin by default.
    """
    app = FastAPI(
        title="Product Store API",
        description="Paginated CRUD API over the product collection",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.product_service = product_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(product_router)

    @app.get("/")
    async def root() -> dict:
        """Liveness message."""
        return {"message": "WORKING"}

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
