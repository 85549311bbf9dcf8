"""Draft Orders API Router.

``POST /api/create-draft-order`` turns a checkout cart into a Shopify draft
order and returns its invoice URL.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import JSONResponse

from ..config import Settings
from ..dependencies import get_app_settings, get_shopify_client
from ..shopify import ShopifyAPIError
from .schemas import CreateDraftOrderRequest, CreateDraftOrderResponse
from .service import DraftOrderService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["draft_orders"])


@router.options("/create-draft-order", include_in_schema=False)
def create_draft_order_preflight() -> Response:
    return Response(status_code=200)


@router.post(
    "/create-draft-order",
    response_model=CreateDraftOrderResponse,
    status_code=200,
    summary="Create a draft order",
    description="""
    Create a Shopify draft order from checkout line items.

    **Body:** `line_items` (or `items`), optional `note`, optional
    `customer.email` / `customer_email`.

    **Errors:** 400 for malformed input; Shopify errors are relayed with
    Shopify's status code.
    """,
)
def create_draft_order(
    request: Request,
    body: Any = Body(None),
    settings: Settings = Depends(get_app_settings),
):
    """Create a draft order and return its invoice URL.

    Raises:
        InvalidDraftOrderRequest: Rendered as 400 by the app exception handler
        ShopifyNotConfiguredError: Rendered as 500 by the app exception handler
        ShopifyTransportError: Rendered as 500 by the app exception handler
    """
    # body errors are 400 even when Shopify is not configured
    create_request = CreateDraftOrderRequest.from_body(body)
    client = get_shopify_client(request)
    service = DraftOrderService.from_settings(client, settings)

    try:
        return service.create(create_request)
    except ShopifyAPIError as e:
        logger.error(
            "Shopify API error",
            extra={"status_code": e.status_code, "details": e.body},
        )
        return JSONResponse(
            status_code=e.status_code,
            content={
                "error": e.errors or "Failed to create draft order",
                "details": e.body,
            },
        )
