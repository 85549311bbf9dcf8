"""Exceptions raised by the Shopify Admin API client.

Handlers catch these and map them onto HTTP responses; see
``checkout_api.main`` for the application-wide handlers.
"""

from typing import Any, Optional


class ShopifyError(Exception):
    """Base exception for Shopify-related errors."""
    pass


class ShopifyNotConfiguredError(ShopifyError):
    """Raised when the store domain or access token is missing."""

    def __init__(self, missing: Optional[list[str]] = None):
        self.missing = missing or []
        super().__init__("API not configured")


class ShopifyTransportError(ShopifyError):
    """Raised when Shopify could not be reached (DNS, TLS, timeout, reset)."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(message)


class ShopifyResponseError(ShopifyError):
    """Raised when a 2xx answer is not the JSON resource that was expected."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(message)


class ShopifyAPIError(ShopifyError):
    """Raised when Shopify answers with a non-2xx status.

    Attributes:
        operation: Client operation name, e.g. "create_draft_order"
        status_code: Upstream HTTP status
        body: Parsed JSON body when available, raw text otherwise
    """

    def __init__(self, operation: str, status_code: int, body: Any):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(f"Shopify {operation} failed with HTTP {status_code}")

    @property
    def errors(self) -> Any:
        """The ``errors`` member of a JSON error body, if there is one."""
        if isinstance(self.body, dict):
            return self.body.get("errors")
        return None
