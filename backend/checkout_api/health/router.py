"""Observability API endpoints: health report and Prometheus metrics."""

from fastapi import APIRouter, Depends, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ..config import Settings
from ..dependencies import get_app_settings
from .schemas import HealthResponse
from .service import build_health_report

router = APIRouter(tags=["observability"])


@router.options("/health", include_in_schema=False)
def health_preflight() -> Response:
    return Response(status_code=200)


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Health check endpoint",
    description="Configuration presence and Shopify connectivity. Always 200.",
)
def health_check(request: Request, settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    return build_health_report(settings, request.app.state.shopify_client)


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Expose Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
