"""Cleanup API Router.

``/api/cleanup-drafts``:

- ``GET`` without the scheduler marker: static description, no side effects
- ``GET`` from the scheduler, or ``POST`` with the cron secret: run the sweep
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ..config import Settings
from ..dependencies import get_app_settings, get_shopify_client
from ..shopify import ShopifyAPIError, ShopifyResponseError, ShopifyTransportError
from ..timeutils import isoformat_z, utcnow
from .auth import is_authorized_trigger, is_cron_invocation
from .schemas import CleanupDescription, CleanupResponse, CleanupSummary
from .service import DraftCleanupService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cleanup"])


@router.options("/cleanup-drafts", include_in_schema=False)
def cleanup_preflight() -> Response:
    return Response(status_code=200)


def run_cleanup(request: Request, settings: Settings):
    """Authorize the caller and run one sweep."""
    if not is_authorized_trigger(request.headers, settings):
        logger.warning("Rejected unauthorized cleanup trigger")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Unauthorized"},
        )

    client = get_shopify_client(request)
    service = DraftCleanupService.from_settings(client, settings)

    try:
        result = service.run()
    except (ShopifyAPIError, ShopifyTransportError, ShopifyResponseError) as e:
        details = e.body if isinstance(e, ShopifyAPIError) else str(e)
        logger.error("Failed to fetch draft orders", extra={"details": details})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch draft orders", "details": details},
        )

    return CleanupResponse(
        timestamp=isoformat_z(utcnow()),
        cutoff_time=isoformat_z(result.cutoff_time),
        results=CleanupSummary(
            total_checked=result.checked,
            deleted=result.deleted,
            failed=result.failed,
        ),
    )


@router.get(
    "/cleanup-drafts",
    response_model=Union[CleanupDescription, CleanupResponse],
    summary="Describe or run the draft order cleanup",
)
def cleanup_drafts_get(request: Request, settings: Settings = Depends(get_app_settings)):
    """Describe the endpoint, or run the sweep when called by the scheduler."""
    if not is_cron_invocation(request.headers, settings):
        return CleanupDescription(
            description=f"Deletes draft orders older than {settings.DRAFT_ORDER_MAX_AGE_MINUTES} minutes",
            schedule=f"Runs every {settings.DRAFT_ORDER_MAX_AGE_MINUTES} minutes via the platform scheduler",
        )
    return run_cleanup(request, settings)


@router.post(
    "/cleanup-drafts",
    response_model=CleanupResponse,
    summary="Run the draft order cleanup",
    description="""
    Delete open draft orders older than the configured age.

    **Auth:** scheduler marker header or `Authorization: Bearer <CRON_SECRET>`.
    """,
)
def cleanup_drafts_post(request: Request, settings: Settings = Depends(get_app_settings)):
    return run_cleanup(request, settings)
