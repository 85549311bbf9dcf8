"""Shade Checkout API - Main FastAPI Application

Bridges the storefront checkout to the Shopify Admin REST API:
- POST /api/create-draft-order   checkout cart -> Shopify draft order
- GET|POST /api/cleanup-drafts   delete stale open draft orders
- GET /api/health                configuration and connectivity report

Settings are read once in ``create_app``; the Shopify client is built there
when credentials are present and shared by all requests.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .cleanup.router import router as cleanup_router
from .config import Settings, get_settings
from .cors import EmptyPreflightCORSMiddleware
from .draft_orders.router import router as draft_orders_router
from .draft_orders.schemas import InvalidDraftOrderRequest
from .health.router import router as health_router
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.request_id import REQUEST_ID_HEADER
from .shopify import ShopifyAdminClient, ShopifyNotConfiguredError, ShopifyResponseError, ShopifyTransportError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"error": ...}`` with the matching status."""

    @app.exception_handler(InvalidDraftOrderRequest)
    async def invalid_request_handler(request: Request, exc: InvalidDraftOrderRequest) -> JSONResponse:
        logger.warning(f"Rejected request on {request.url.path}: {exc}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(
            f"Validation error on {request.method} {request.url.path}",
            extra={"details": jsonable_encoder(exc.errors())},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Method not allowed" if exc.status_code == 405 else exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ShopifyNotConfiguredError)
    async def not_configured_handler(request: Request, exc: ShopifyNotConfiguredError) -> JSONResponse:
        logger.error(f"Shopify not configured, missing: {', '.join(exc.missing)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "API not configured"},
        )

    @app.exception_handler(ShopifyTransportError)
    @app.exception_handler(ShopifyResponseError)
    async def transport_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Shopify API request failed", "message": str(exc)},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "message": str(exc)},
        )


def create_app(
    settings: Optional[Settings] = None,
    shopify_client: Optional[ShopifyAdminClient] = None,
    shopify_transport: Optional[httpx.BaseTransport] = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Application factory.

    Args:
        settings: Settings to use (defaults to environment settings)
        shopify_client: Pre-built client; when omitted one is built from settings
        shopify_transport: httpx transport for the built client (tests)
        configure_logs: Install the JSON log handler
    """
    settings = settings or get_settings()

    if configure_logs:
        configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    if shopify_client is None and settings.shopify_configured:
        shopify_client = ShopifyAdminClient.from_settings(settings, transport=shopify_transport)

    missing = settings.missing_required()
    if missing:
        logger.warning(f"Shopify is not configured; missing {', '.join(missing)}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.SERVICE_NAME} starting up (environment: {settings.ENVIRONMENT})")
        yield
        if app.state.shopify_client is not None:
            app.state.shopify_client.close()
        logger.info(f"{settings.SERVICE_NAME} shutting down")

    docs_enabled = settings.ENVIRONMENT != "production"
    app = FastAPI(
        title="Shade Checkout API",
        description="Storefront checkout bridge to the Shopify Admin API",
        version=settings.SERVICE_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.shopify_client = shopify_client

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        EmptyPreflightCORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    register_exception_handlers(app)

    app.include_router(draft_orders_router, prefix="/api")
    app.include_router(cleanup_router, prefix="/api")
    app.include_router(health_router, prefix="/api")

    @app.get("/", include_in_schema=False)
    def root() -> dict[str, Any]:
        return {
            "name": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "status": "running",
            "endpoints": {
                "create_draft_order": "/api/create-draft-order",
                "cleanup_drafts": "/api/cleanup-drafts",
                "health": "/api/health",
            },
        }

    return app


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "checkout_api.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=get_settings().ENVIRONMENT == "development",
        log_level=get_settings().LOG_LEVEL.lower(),
    )
