"""Pydantic schemas for the draft order endpoint.

The request side is parsed by hand in ``CreateDraftOrderRequest.from_body``
because checkout clients send loosely typed JSON (quantities as strings,
``items`` instead of ``line_items``) and every rejection must be a 400.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class InvalidDraftOrderRequest(ValueError):
    """Raised for client input errors; rendered as HTTP 400."""
    pass


class CreateDraftOrderRequest(BaseModel):
    """Normalized create request."""
    line_items: List[Dict[str, Any]] = Field(..., min_length=1)
    note: Optional[str] = None
    customer_email: Optional[str] = None

    @classmethod
    def from_body(cls, body: Any) -> "CreateDraftOrderRequest":
        """Validate a raw JSON body.

        ``line_items`` wins over ``items`` when both are present. The customer
        email comes from ``customer.email`` or the ``customer_email`` shorthand.

        Raises:
            InvalidDraftOrderRequest: If the body is not an object, or the line
                item array is missing, not an array, empty, or holds non-objects
        """
        if not isinstance(body, dict):
            raise InvalidDraftOrderRequest("line_items array is required")

        line_items = body.get("line_items")
        if line_items is None:
            line_items = body.get("items")

        if not isinstance(line_items, list) or not line_items:
            raise InvalidDraftOrderRequest("line_items array is required")

        for index, item in enumerate(line_items):
            if not isinstance(item, dict):
                raise InvalidDraftOrderRequest(f"line_items[{index}] must be an object")

        note = body.get("note")
        note = str(note) if note else None

        customer_email = None
        customer = body.get("customer")
        if isinstance(customer, dict) and customer.get("email"):
            customer_email = str(customer["email"])
        elif body.get("customer_email"):
            customer_email = str(body["customer_email"])

        return cls(line_items=line_items, note=note, customer_email=customer_email)


class CreateDraftOrderResponse(BaseModel):
    """Successful creation result returned to the storefront."""
    success: bool = True
    draft_order_id: int
    invoice_url: Optional[str] = None
    total_price: Optional[str] = None
    subtotal_price: Optional[str] = None
    total_tax: Optional[str] = None

    @classmethod
    def from_draft_order(cls, draft_order: Dict[str, Any]) -> "CreateDraftOrderResponse":
        return cls(
            draft_order_id=draft_order["id"],
            invoice_url=draft_order.get("invoice_url"),
            total_price=draft_order.get("total_price"),
            subtotal_price=draft_order.get("subtotal_price"),
            total_tax=draft_order.get("total_tax"),
        )
