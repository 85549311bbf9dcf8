"""Pytest fixtures for the checkout API.

Provides reusable test fixtures for:
- Settings pointing at a fake shop
- A fake Shopify Admin API served through httpx.MockTransport
- A FastAPI TestClient wired to that fake

Usage:
    def test_health(client, fake_shopify):
        fake_shopify.add("GET", "/shop.json", json={"shop": {...}})
        response = client.get("/api/health")
        assert response.status_code == 200
"""

from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from checkout_api.config import Settings
from checkout_api.main import create_app
from checkout_api.shopify import ShopifyAdminClient

STORE_DOMAIN = "test-shop.myshopify.com"
API_PREFIX = "/admin/api/2024-01"
CRON_SECRET = "test-cron-secret"

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeShopify:
    """Records requests and answers them from queued responses.

    Responses are registered per (method, path) where path is relative to the
    versioned API root, e.g. ("DELETE", "/draft_orders/1.json"). A queue with
    several entries is consumed in order; the last entry is reused.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[Responder]] = {}

    def add(self, method: str, path: str, responder: Responder = None, **response_kwargs: Any) -> None:
        if responder is None:
            responder = httpx.Response(response_kwargs.pop("status_code", 200), **response_kwargs)
        self._routes.setdefault((method.upper(), path), []).append(responder)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len(API_PREFIX):]
        queue = self._routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"errors": "Not Found"})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(responder) and not isinstance(responder, httpx.Response):
            return responder(request)
        return responder

    def calls(self, method: str, path: str = None) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and (path is None or r.url.path == API_PREFIX + path)
        ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        SHOPIFY_STORE_DOMAIN=STORE_DOMAIN,
        SHOPIFY_ADMIN_ACCESS_TOKEN="shpat_test_token",
        CRON_SECRET=CRON_SECRET,
        CLEANUP_DELETE_DELAY_SECONDS=0,
        LOG_JSON=False,
    )


@pytest.fixture
def fake_shopify() -> FakeShopify:
    return FakeShopify()


@pytest.fixture
def shopify_client(settings: Settings, fake_shopify: FakeShopify) -> ShopifyAdminClient:
    client = ShopifyAdminClient.from_settings(settings, transport=httpx.MockTransport(fake_shopify.handler))
    yield client
    client.close()


@pytest.fixture
def app(settings: Settings, shopify_client: ShopifyAdminClient):
    return create_app(settings, shopify_client=shopify_client, configure_logs=False)


@pytest.fixture
def client(app) -> TestClient:
    """Unauthenticated test client against the fake shop."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def unconfigured_client() -> TestClient:
    """Test client for an app started without Shopify credentials."""
    settings = Settings(
        _env_file=None,
        SHOPIFY_STORE_DOMAIN=None,
        SHOPIFY_ADMIN_ACCESS_TOKEN=None,
        CRON_SECRET=CRON_SECRET,
    )
    app = create_app(settings, configure_logs=False)
    return TestClient(app, raise_server_exceptions=False)
