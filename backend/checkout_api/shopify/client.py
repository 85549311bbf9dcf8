"""
Shopify Admin REST API client.

Thin wrapper over a shared ``httpx.Client`` that knows the handful of
endpoints this service touches:

- ``POST   draft_orders.json``       create a draft order
- ``GET    draft_orders.json``       list draft orders (cursor paginated)
- ``DELETE draft_orders/{id}.json``  delete a draft order
- ``GET    shop.json``               shop metadata, used as a connectivity probe

Every call is timed and counted. Non-2xx answers raise ``ShopifyAPIError``,
transport failures raise ``ShopifyTransportError``, and a 2xx body that is
not the expected JSON resource raises ``ShopifyResponseError``.
"""

import logging
import time
from typing import Any, Dict, Iterator, List, Optional, Tuple

import httpx

from ..config import Settings
from ..observability.metrics import shopify_latency_seconds, shopify_requests_total
from .errors import ShopifyAPIError, ShopifyNotConfiguredError, ShopifyResponseError, ShopifyTransportError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"

JsonDict = Dict[str, Any]


def _response_body(response: httpx.Response) -> Any:
    """Parse a JSON body, falling back to text for HTML or empty error pages."""
    try:
        return response.json()
    except ValueError:
        return response.text


class ShopifyAdminClient:
    """
    Client for the Shopify Admin REST API.

    Usage:
        client = ShopifyAdminClient.from_settings(settings)
        draft = client.create_draft_order({"draft_order": {...}})
        client.close()

    Args:
        store_domain: e.g. "example.myshopify.com"
        access_token: Admin API access token
        api_version: Versioned path segment, e.g. "2024-01"
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
    """

    def __init__(
        self,
        store_domain: str,
        access_token: str,
        api_version: str = "2024-01",
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.store_domain = store_domain
        self.base_url = f"https://{store_domain}/admin/api/{api_version}"
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                ACCESS_TOKEN_HEADER: access_token,
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "ShopifyAdminClient":
        """Build a client from settings.

        Raises:
            ShopifyNotConfiguredError: If the store domain or token is missing
        """
        missing = settings.missing_required()
        if missing:
            raise ShopifyNotConfiguredError(missing)
        return cls(
            store_domain=settings.SHOPIFY_STORE_DOMAIN,
            access_token=settings.SHOPIFY_ADMIN_ACCESS_TOKEN,
            api_version=settings.SHOPIFY_API_VERSION,
            timeout=settings.SHOPIFY_TIMEOUT_SECONDS,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request, recording metrics and translating failures."""
        start = time.perf_counter()
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            shopify_requests_total.labels(operation=operation, status="transport_error").inc()
            logger.error(
                f"Shopify {operation} request failed: {e}",
                extra={"operation": operation, "error": str(e)},
            )
            raise ShopifyTransportError(operation, str(e) or type(e).__name__) from e
        finally:
            shopify_latency_seconds.labels(operation=operation).observe(time.perf_counter() - start)

        shopify_requests_total.labels(operation=operation, status=str(response.status_code)).inc()

        if not response.is_success:
            body = _response_body(response)
            logger.warning(
                f"Shopify {operation} returned HTTP {response.status_code}",
                extra={
                    "operation": operation,
                    "status_code": response.status_code,
                    "details": body,
                },
            )
            raise ShopifyAPIError(operation, response.status_code, body)

        return response

    def _json_object(self, operation: str, response: httpx.Response) -> JsonDict:
        try:
            body = response.json()
        except ValueError:
            raise ShopifyResponseError(
                operation, f"Shopify returned a non-JSON body (HTTP {response.status_code})"
            )
        if not isinstance(body, dict):
            raise ShopifyResponseError(operation, "Shopify returned JSON that is not an object")
        return body

    def _resource(self, operation: str, response: httpx.Response, key: str) -> JsonDict:
        """Return ``body[key]``, raising ShopifyResponseError when it is missing."""
        resource = self._json_object(operation, response).get(key)
        if not isinstance(resource, dict):
            raise ShopifyResponseError(operation, f"Shopify response has no '{key}' object")
        return resource

    # ------------------------------------------------------------------
    # Draft orders
    # ------------------------------------------------------------------

    def create_draft_order(self, payload: JsonDict) -> JsonDict:
        """Create a draft order and return the ``draft_order`` resource."""
        response = self._request("create_draft_order", "POST", "/draft_orders.json", json=payload)
        return self._resource("create_draft_order", response, "draft_order")

    def list_draft_orders_page(
        self,
        status: str = "open",
        limit: int = 250,
        page_info: Optional[str] = None,
    ) -> Tuple[List[JsonDict], Optional[str]]:
        """Fetch one page of draft orders.

        Shopify rejects filter parameters alongside ``page_info``, so follow-up
        pages only carry ``limit`` and the cursor.

        Returns:
            (draft_orders, next_page_info) where next_page_info is None on the last page
        """
        params: Dict[str, Any] = {"limit": limit}
        if page_info:
            params["page_info"] = page_info
        else:
            params["status"] = status

        response = self._request("list_draft_orders", "GET", "/draft_orders.json", params=params)
        draft_orders = self._json_object("list_draft_orders", response).get("draft_orders") or []

        next_url = response.links.get("next", {}).get("url")
        next_page_info = httpx.URL(next_url).params.get("page_info") if next_url else None
        return draft_orders, next_page_info

    def iter_draft_order_pages(
        self,
        status: str = "open",
        limit: int = 250,
        max_pages: int = 10,
    ) -> Iterator[List[JsonDict]]:
        """Yield pages of draft orders until the cursor runs out or max_pages is hit."""
        page_info: Optional[str] = None
        for page_number in range(1, max_pages + 1):
            draft_orders, page_info = self.list_draft_orders_page(
                status=status, limit=limit, page_info=page_info
            )
            yield draft_orders
            if not page_info:
                return
        logger.warning(
            f"Stopped listing draft orders after {max_pages} pages; more remain",
            extra={"operation": "list_draft_orders"},
        )

    def delete_draft_order(self, draft_order_id: Any) -> None:
        self._request("delete_draft_order", "DELETE", f"/draft_orders/{draft_order_id}.json")

    # ------------------------------------------------------------------
    # Shop
    # ------------------------------------------------------------------

    def get_shop(self) -> JsonDict:
        response = self._request("get_shop", "GET", "/shop.json")
        return self._resource("get_shop", response, "shop")
