"""Cleanup service for stale Shopify draft orders.

Checkout creates a draft order per attempt; the ones nobody pays for pile up.
The sweep:

1. computes a cutoff (now minus the max age, 30 minutes by default)
2. lists every open draft order, following the page cursor up to a page cap
3. keeps those created strictly before the cutoff
4. deletes them one at a time with a fixed pause in between

A failed deletion is recorded and the loop moves on. A failed listing aborts
the sweep before anything is deleted.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config import Settings
from ..observability.metrics import draft_cleanup_deletions_total
from ..shopify import ShopifyAdminClient, ShopifyAPIError, ShopifyTransportError
from ..timeutils import isoformat_z, parse_timestamp, utcnow
from .schemas import CleanupDetail, CleanupResult

logger = logging.getLogger(__name__)


def select_stale_drafts(draft_orders: Iterable[Dict[str, Any]], cutoff: datetime) -> List[Dict[str, Any]]:
    """Return draft orders created strictly before cutoff.

    Orders without a parseable ``created_at`` are skipped.
    """
    stale = []
    for draft in draft_orders:
        created_at = parse_timestamp(draft.get("created_at"))
        if created_at is None:
            logger.warning(
                f"Skipping draft order {draft.get('id')} with unreadable created_at",
                extra={"draft_order_id": draft.get("id")},
            )
            continue
        if created_at < cutoff:
            stale.append(draft)
    return stale


class DraftCleanupService:
    """Deletes open draft orders older than a maximum age.

    Args:
        client: Shopify client
        max_age_minutes: Drafts older than this are deleted
        page_size: Draft orders per list page (Shopify allows at most 250)
        max_pages: Upper bound on list pages per sweep
        delete_delay_seconds: Pause between consecutive deletions
        sleep: Sleep function, replaceable in tests
        now: Clock returning an aware datetime, replaceable in tests
    """

    def __init__(
        self,
        client: ShopifyAdminClient,
        max_age_minutes: int = 30,
        page_size: int = 250,
        max_pages: int = 10,
        delete_delay_seconds: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = utcnow,
    ):
        self.client = client
        self.max_age = timedelta(minutes=max_age_minutes)
        self.page_size = page_size
        self.max_pages = max_pages
        self.delete_delay_seconds = delete_delay_seconds
        self.sleep = sleep
        self.now = now

    @classmethod
    def from_settings(cls, client: ShopifyAdminClient, settings: Settings, **overrides: Any) -> "DraftCleanupService":
        options = dict(
            max_age_minutes=settings.DRAFT_ORDER_MAX_AGE_MINUTES,
            page_size=settings.CLEANUP_PAGE_SIZE,
            max_pages=settings.CLEANUP_MAX_PAGES,
            delete_delay_seconds=settings.CLEANUP_DELETE_DELAY_SECONDS,
        )
        options.update(overrides)
        return cls(client, **options)

    def calculate_cutoff(self) -> datetime:
        return self.now() - self.max_age

    def fetch_open_draft_orders(self) -> List[Dict[str, Any]]:
        """List all open draft orders (bounded by max_pages).

        Raises:
            ShopifyAPIError / ShopifyTransportError: If any page fails
        """
        draft_orders: List[Dict[str, Any]] = []
        for page in self.client.iter_draft_order_pages(
            status="open", limit=self.page_size, max_pages=self.max_pages
        ):
            draft_orders.extend(page)
        return draft_orders

    def delete_draft(self, draft: Dict[str, Any]) -> CleanupDetail:
        """Delete one draft order and describe the outcome. Never raises Shopify errors."""
        draft_id = draft.get("id")
        name = draft.get("name")
        try:
            self.client.delete_draft_order(draft_id)
        except ShopifyAPIError as e:
            logger.error(
                f"Failed to delete {draft_id}",
                extra={"draft_order_id": draft_id, "status_code": e.status_code, "details": e.body},
            )
            return CleanupDetail(id=draft_id, name=name, status="failed", error=e.body)
        except ShopifyTransportError as e:
            logger.error(
                f"Error deleting {draft_id}: {e}",
                extra={"draft_order_id": draft_id, "error": str(e)},
            )
            return CleanupDetail(id=draft_id, name=name, status="error", error=str(e))

        logger.info(
            f"Deleted draft order {draft_id} ({name})",
            extra={"draft_order_id": draft_id, "draft_order_name": name},
        )
        return CleanupDetail(
            id=draft_id,
            name=name,
            created_at=draft.get("created_at"),
            status="deleted",
        )

    def run(self, cutoff: Optional[datetime] = None) -> CleanupResult:
        """Run one sweep.

        Raises:
            ShopifyAPIError / ShopifyTransportError: If listing draft orders fails;
                no deletions have happened in that case
        """
        cutoff = cutoff or self.calculate_cutoff()
        logger.info("Starting draft order cleanup", extra={"cutoff_time": isoformat_z(cutoff)})

        draft_orders = self.fetch_open_draft_orders()
        logger.info(f"Found {len(draft_orders)} open draft orders")

        stale = select_stale_drafts(draft_orders, cutoff)
        logger.info(f"Found {len(stale)} draft orders older than {self.max_age}")

        result = CleanupResult(cutoff_time=cutoff, checked=len(draft_orders))
        for index, draft in enumerate(stale):
            if index and self.delete_delay_seconds:
                self.sleep(self.delete_delay_seconds)
            detail = self.delete_draft(draft)
            draft_cleanup_deletions_total.labels(outcome=detail.status).inc()
            result.record(detail)

        logger.info(
            "Cleanup complete",
            extra={
                "total_checked": result.checked,
                "deleted": result.deleted,
                "failed": result.failed,
                "details": [detail.model_dump(exclude_none=True) for detail in result.details],
            },
        )
        if result.failed:
            logger.warning(f"Cleanup finished with {result.failed} failed deletions")

        return result
