"""Unit tests for draft order request parsing and response mapping."""

import pytest

from checkout_api.draft_orders.schemas import (
    CreateDraftOrderRequest,
    CreateDraftOrderResponse,
    InvalidDraftOrderRequest,
)


class TestCreateDraftOrderRequest:

    @pytest.mark.parametrize("body", [
        None,
        [],
        "line_items",
        {},
        {"line_items": []},
        {"line_items": None},
        {"line_items": {"title": "A"}},
        {"line_items": "A"},
        {"items": []},
    ])
    def test_missing_or_empty_line_items_rejected(self, body):
        with pytest.raises(InvalidDraftOrderRequest) as exc:
            CreateDraftOrderRequest.from_body(body)

        assert "line_items" in str(exc.value)

    def test_non_object_line_item_rejected(self):
        with pytest.raises(InvalidDraftOrderRequest) as exc:
            CreateDraftOrderRequest.from_body({"line_items": [{"price": "1"}, "oops"]})

        assert "line_items[1]" in str(exc.value)

    def test_items_alias(self):
        request = CreateDraftOrderRequest.from_body({"items": [{"title": "A", "price": "1"}]})

        assert request.line_items == [{"title": "A", "price": "1"}]

    def test_line_items_win_over_items(self):
        request = CreateDraftOrderRequest.from_body({
            "line_items": [{"title": "Primary", "price": "1"}],
            "items": [{"title": "Fallback", "price": "1"}],
        })

        assert request.line_items[0]["title"] == "Primary"

    def test_customer_email_sources(self):
        nested = CreateDraftOrderRequest.from_body({
            "line_items": [{"price": "1"}],
            "customer": {"email": "nested@example.com"},
            "customer_email": "flat@example.com",
        })
        flat = CreateDraftOrderRequest.from_body({
            "line_items": [{"price": "1"}],
            "customer_email": "flat@example.com",
        })
        none = CreateDraftOrderRequest.from_body({
            "line_items": [{"price": "1"}],
            "customer": {"name": "No email"},
        })

        assert nested.customer_email == "nested@example.com"
        assert flat.customer_email == "flat@example.com"
        assert none.customer_email is None

    def test_empty_note_is_dropped(self):
        request = CreateDraftOrderRequest.from_body({"line_items": [{"price": "1"}], "note": ""})

        assert request.note is None


class TestCreateDraftOrderResponse:

    def test_from_draft_order(self):
        response = CreateDraftOrderResponse.from_draft_order({
            "id": 994118539,
            "name": "#D2",
            "invoice_url": "https://test-shop.myshopify.com/invoices/abc",
            "total_price": "108.23",
            "subtotal_price": "99.98",
            "total_tax": "8.25",
        })

        assert response.model_dump() == {
            "success": True,
            "draft_order_id": 994118539,
            "invoice_url": "https://test-shop.myshopify.com/invoices/abc",
            "total_price": "108.23",
            "subtotal_price": "99.98",
            "total_tax": "8.25",
        }
