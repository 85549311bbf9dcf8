"""FastAPI middleware for observability.

Assigns a request ID to every call and logs start, completion and failure.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import get_logger
from .metrics import http_request_duration_seconds
from .request_id import REQUEST_ID_HEADER, resolve_request_id, set_request_id

logger = get_logger(__name__)

UNMATCHED_ROUTE = "unmatched"


def route_label(request: Request) -> str:
    """Route template for metric labels, so unknown paths share one series."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to generate and inject request IDs."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers)
        set_request_id(request_id)

        start_time = time.perf_counter()
        logger.info(
            f"{request.method} {request.url.path}",
            extra={"method": request.method, "path": request.url.path},
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {e}",
                extra={"path": request.url.path, "duration_ms": round(duration_ms, 2)},
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - start_time
        http_request_duration_seconds.labels(
            method=request.method,
            path=route_label(request),
            status=str(response.status_code),
        ).observe(elapsed)
        logger.info(
            f"Request completed: {response.status_code}",
            extra={
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(elapsed * 1000, 2),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
