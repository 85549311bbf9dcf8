"""Draft order creation against the Shopify Admin API.

One request produces exactly one outbound create call. No idempotency key is
sent, so a client retrying after a timeout can end up with two drafts; the
cleanup sweep removes whichever one is never paid.
"""

import logging
from typing import Optional

from ..config import Settings
from ..observability.metrics import draft_orders_created_total
from ..shopify import ShopifyAdminClient, ShopifyAPIError
from .schemas import CreateDraftOrderRequest, CreateDraftOrderResponse
from .translation import DraftOrderDefaults, build_draft_order_payload

logger = logging.getLogger(__name__)


class DraftOrderService:
    """Creates Shopify draft orders from checkout requests.

    Usage:
        service = DraftOrderService(client, DraftOrderDefaults(tags=["checkout"]))
        result = service.create(CreateDraftOrderRequest.from_body(body))
    """

    def __init__(self, client: ShopifyAdminClient, defaults: Optional[DraftOrderDefaults] = None):
        self.client = client
        self.defaults = defaults or DraftOrderDefaults()

    @classmethod
    def from_settings(cls, client: ShopifyAdminClient, settings: Settings) -> "DraftOrderService":
        return cls(
            client,
            DraftOrderDefaults(
                default_title=settings.DEFAULT_LINE_ITEM_TITLE,
                default_note=settings.DRAFT_ORDER_DEFAULT_NOTE,
                tags=settings.draft_order_tags,
            ),
        )

    def create(self, request: CreateDraftOrderRequest) -> CreateDraftOrderResponse:
        """Translate and submit the request.

        Raises:
            InvalidDraftOrderRequest: If a line item cannot be translated
            ShopifyAPIError: If Shopify rejects the draft order
            ShopifyTransportError: If Shopify cannot be reached
        """
        try:
            payload = build_draft_order_payload(request, self.defaults)
        except ValueError:
            draft_orders_created_total.labels(status="rejected").inc()
            raise

        line_items = payload["draft_order"]["line_items"]
        for line_item in line_items:
            if "variant_id" in line_item:
                logger.debug(
                    f"Line item with variant {line_item['variant_id']}, custom price: {line_item.get('price')}"
                )
            else:
                logger.debug(f"Custom line item: {line_item['title']}, price: {line_item['price']}")

        logger.info(
            "Creating draft order",
            extra={"operation": "create_draft_order", "line_item_count": len(line_items)},
        )

        try:
            draft_order = self.client.create_draft_order(payload)
        except ShopifyAPIError:
            draft_orders_created_total.labels(status="upstream_error").inc()
            raise

        draft_orders_created_total.labels(status="success").inc()
        logger.info(
            f"Draft order created: {draft_order.get('id')}",
            extra={
                "draft_order_id": draft_order.get("id"),
                "draft_order_name": draft_order.get("name"),
            },
        )
        return CreateDraftOrderResponse.from_draft_order(draft_order)
