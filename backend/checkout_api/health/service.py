"""Health check utilities.

Reports whether configuration is present and whether Shopify answers. A
failing Shopify probe is reported in the body; it never fails the request.
"""

import logging
from typing import Optional

from ..config import Settings
from ..shopify import ShopifyAdminClient, ShopifyAPIError, ShopifyResponseError, ShopifyTransportError
from ..timeutils import isoformat_z, utcnow
from .schemas import ConfigStatus, HealthResponse, ShopifyStatus

logger = logging.getLogger(__name__)

SET = "✓ Set"
MISSING = "✗ Missing"


def _presence(value: Optional[str]) -> str:
    return SET if value else MISSING


def check_config(settings: Settings) -> ConfigStatus:
    """Presence of each setting; values are never echoed."""
    return ConfigStatus(
        shopifyStore=_presence(settings.SHOPIFY_STORE_DOMAIN),
        apiToken=_presence(settings.SHOPIFY_ADMIN_ACCESS_TOKEN),
        cronSecret=_presence(settings.CRON_SECRET),
    )


def check_shopify_connection(client: Optional[ShopifyAdminClient]) -> ShopifyStatus:
    """Probe ``shop.json`` once.

    Args:
        client: Shopify client, or None when credentials are missing

    Returns:
        ShopifyStatus: connected with shop metadata, or disconnected with an error
    """
    if client is None:
        return ShopifyStatus(connected=False)

    try:
        shop = client.get_shop()
    except ShopifyAPIError as e:
        logger.warning(f"Shopify health check failed: HTTP {e.status_code}")
        return ShopifyStatus(connected=False, error=f"Shopify returned HTTP {e.status_code}")
    except (ShopifyTransportError, ShopifyResponseError) as e:
        logger.error(f"Shopify health check failed: {e}")
        return ShopifyStatus(connected=False, error=str(e))

    return ShopifyStatus(
        connected=True,
        shopName=shop.get("name"),
        shopDomain=shop.get("domain"),
        plan=shop.get("plan_name"),
    )


def build_health_report(settings: Settings, client: Optional[ShopifyAdminClient]) -> HealthResponse:
    return HealthResponse(
        timestamp=isoformat_z(utcnow()),
        service=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        config=check_config(settings),
        shopify=check_shopify_connection(client),
    )
