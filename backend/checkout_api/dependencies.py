"""FastAPI dependencies shared by the routers.

Settings and the Shopify client are created once by ``create_app`` and kept
on ``app.state``; these helpers hand them to request handlers.
"""

from fastapi import Request

from .config import Settings
from .shopify import ShopifyAdminClient, ShopifyNotConfiguredError


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_shopify_client(request: Request) -> ShopifyAdminClient:
    """Return the app's Shopify client.

    Raises:
        ShopifyNotConfiguredError: If the app started without Shopify credentials
    """
    client = request.app.state.shopify_client
    if client is None:
        raise ShopifyNotConfiguredError(request.app.state.settings.missing_required())
    return client
