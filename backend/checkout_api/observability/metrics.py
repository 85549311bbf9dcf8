"""Prometheus metrics for the checkout API."""

from prometheus_client import Counter, Histogram

http_request_duration_seconds = Histogram(
    "checkout_http_request_duration_seconds",
    "Inbound HTTP request duration in seconds",
    ["method", "path", "status"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

shopify_requests_total = Counter(
    "checkout_shopify_requests_total",
    "Outbound Shopify Admin API calls",
    ["operation", "status"],  # status: HTTP code or "transport_error"
)

shopify_latency_seconds = Histogram(
    "checkout_shopify_latency_seconds",
    "Shopify Admin API call latency in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 15.0],
)

draft_orders_created_total = Counter(
    "checkout_draft_orders_created_total",
    "Draft orders created through the checkout API",
    ["status"],  # success|rejected|upstream_error
)

draft_cleanup_deletions_total = Counter(
    "checkout_draft_cleanup_deletions_total",
    "Stale draft order deletions attempted by the cleanup sweep",
    ["outcome"],  # deleted|failed|error
)
