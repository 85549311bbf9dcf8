"""Unit tests for the stale draft order cleanup sweep.

The Shopify client is a Mock; these tests cover selection, sequencing and
failure handling without HTTP.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, call

import pytest

from checkout_api.cleanup.service import DraftCleanupService, select_stale_drafts
from checkout_api.shopify import ShopifyAPIError, ShopifyTransportError
from checkout_api.timeutils import isoformat_z

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def draft(draft_id, minutes_old, name=None):
    return {
        "id": draft_id,
        "name": name or f"#D{draft_id}",
        "created_at": isoformat_z(NOW - timedelta(minutes=minutes_old)),
    }


class TestSelectStaleDrafts:
    """Strict less-than comparison against the cutoff."""

    def test_boundaries(self):
        cutoff = NOW - timedelta(minutes=30)
        drafts = [draft(1, 31), draft(2, 29), draft(3, 30)]

        stale = select_stale_drafts(drafts, cutoff)

        assert [d["id"] for d in stale] == [1]

    def test_exactly_at_cutoff_is_kept(self):
        cutoff = NOW - timedelta(minutes=30)

        assert select_stale_drafts([{"id": 1, "created_at": isoformat_z(cutoff)}], cutoff) == []

    def test_offset_timestamps(self):
        """Shopify returns shop-local offsets; comparison is on the instant."""
        cutoff = datetime(2025, 6, 1, 11, 30, tzinfo=timezone.utc)
        drafts = [
            {"id": 1, "created_at": "2025-06-01T07:29:00-04:00"},  # 11:29Z
            {"id": 2, "created_at": "2025-06-01T07:31:00-04:00"},  # 11:31Z
        ]

        assert [d["id"] for d in select_stale_drafts(drafts, cutoff)] == [1]

    @pytest.mark.parametrize("created_at", [None, "", "yesterday", 12345])
    def test_unreadable_timestamps_are_skipped(self, created_at):
        cutoff = NOW - timedelta(minutes=30)

        assert select_stale_drafts([{"id": 1, "created_at": created_at}], cutoff) == []


class TestDraftCleanupService:

    @pytest.fixture
    def client(self):
        client = Mock()
        client.iter_draft_order_pages.return_value = iter([[draft(1, 45), draft(2, 10), draft(3, 60)]])
        return client

    @pytest.fixture
    def sleep(self):
        return Mock()

    @pytest.fixture
    def service(self, client, sleep):
        return DraftCleanupService(client, sleep=sleep, now=lambda: NOW)

    def test_cutoff_is_thirty_minutes_ago(self, service):
        assert service.calculate_cutoff() == NOW - timedelta(minutes=30)

    def test_deletes_only_stale_drafts(self, service, client):
        result = service.run()

        assert client.delete_draft_order.call_args_list == [call(1), call(3)]
        assert result.checked == 3
        assert result.deleted == 2
        assert result.failed == 0
        assert [d.status for d in result.details] == ["deleted", "deleted"]
        assert result.cutoff_time == NOW - timedelta(minutes=30)

    def test_lists_open_drafts_with_page_bounds(self, client, sleep):
        service = DraftCleanupService(client, page_size=100, max_pages=3, sleep=sleep, now=lambda: NOW)

        service.run()

        client.iter_draft_order_pages.assert_called_once_with(status="open", limit=100, max_pages=3)

    def test_pauses_between_deletions(self, service, sleep):
        service.run()

        # two deletions, one pause between them
        sleep.assert_called_once_with(0.1)

    def test_no_pause_when_delay_is_zero(self, client, sleep):
        service = DraftCleanupService(client, delete_delay_seconds=0, sleep=sleep, now=lambda: NOW)

        service.run()

        sleep.assert_not_called()

    def test_failed_deletion_does_not_stop_sweep(self, service, client):
        client.delete_draft_order.side_effect = [
            ShopifyAPIError("delete_draft_order", 422, {"errors": "locked"}),
            None,
        ]

        result = service.run()

        assert client.delete_draft_order.call_count == 2
        assert result.deleted == 1
        assert result.failed == 1
        assert result.details[0].status == "failed"
        assert result.details[0].error == {"errors": "locked"}
        assert result.details[1].status == "deleted"

    def test_transport_error_is_recorded(self, service, client):
        client.delete_draft_order.side_effect = [ShopifyTransportError("delete_draft_order", "timed out"), None]

        result = service.run()

        assert result.details[0].status == "error"
        assert result.details[0].error == "timed out"
        assert result.failed == 1
        assert result.deleted == 1

    def test_list_failure_aborts_before_deleting(self, service, client):
        client.iter_draft_order_pages.side_effect = ShopifyAPIError("list_draft_orders", 503, "unavailable")

        with pytest.raises(ShopifyAPIError):
            service.run()

        client.delete_draft_order.assert_not_called()

    def test_failure_on_later_page_aborts_before_deleting(self, service, client):
        def pages(**kwargs):
            yield [draft(1, 45)]
            raise ShopifyTransportError("list_draft_orders", "connection reset")

        client.iter_draft_order_pages.side_effect = pages

        with pytest.raises(ShopifyTransportError):
            service.run()

        client.delete_draft_order.assert_not_called()

    def test_drafts_across_pages(self, service, client):
        client.iter_draft_order_pages.return_value = iter([[draft(1, 45)], [draft(2, 50), draft(3, 5)]])

        result = service.run()

        assert result.checked == 3
        assert client.delete_draft_order.call_args_list == [call(1), call(2)]

    def test_from_settings(self, settings, client):
        settings.DRAFT_ORDER_MAX_AGE_MINUTES = 45

        service = DraftCleanupService.from_settings(client, settings, now=lambda: NOW)

        assert service.calculate_cutoff() == NOW - timedelta(minutes=45)
        assert service.page_size == 250
        assert service.delete_delay_seconds == 0
