"""Shopify Admin REST API access."""

from .client import ShopifyAdminClient
from .errors import (
    ShopifyAPIError,
    ShopifyError,
    ShopifyNotConfiguredError,
    ShopifyResponseError,
    ShopifyTransportError,
)

__all__ = [
    "ShopifyAdminClient",
    "ShopifyAPIError",
    "ShopifyError",
    "ShopifyNotConfiguredError",
    "ShopifyResponseError",
    "ShopifyTransportError",
]
