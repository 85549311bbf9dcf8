"""Checkout line items to Shopify draft order payload.

Two shapes of line item come out of ``build_line_item``:

- catalog items carry ``variant_id`` plus a price override, which keeps the
  product image in Shopify's checkout;
- custom items carry ``title``/``price`` and are always shippable and taxable.

Property keys starting with ``_`` are storefront-internal and never sent.
"""

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from .schemas import CreateDraftOrderRequest, InvalidDraftOrderRequest

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")
_PLAIN_DECIMAL = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)")


@dataclass
class DraftOrderDefaults:
    """Values injected into every payload."""
    default_title: str = "Custom Shade"
    default_note: Optional[str] = None
    tags: List[str] = field(default_factory=list)


def coerce_quantity(value: Any) -> int:
    """Parse a quantity, defaulting to 1 when absent, invalid or not positive."""
    if isinstance(value, bool):
        quantity = 0
    elif isinstance(value, int):
        quantity = value
    elif isinstance(value, float):
        quantity = int(value) if math.isfinite(value) else 0
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        quantity = int(match.group(1)) if match else 0
    else:
        quantity = 0
    return quantity if quantity > 0 else 1


def coerce_variant_id(value: Any) -> Optional[int]:
    """Return the variant id as an int, or None when the item has none.

    Raises:
        InvalidDraftOrderRequest: If a variant id is given but is not a positive integer
    """
    if value is None or value is False or value == "":
        return None

    variant_id: Optional[int] = None
    if isinstance(value, int) and not isinstance(value, bool):
        variant_id = value
    elif isinstance(value, float) and value.is_integer():
        variant_id = int(value)
    elif isinstance(value, str) and value.strip().isdecimal():
        variant_id = int(value.strip())

    if variant_id is None or variant_id <= 0:
        raise InvalidDraftOrderRequest(f"variant_id must be a positive integer, got {value!r}")
    return variant_id


def normalize_price(value: Any) -> Optional[str]:
    """Return the price as the string Shopify expects, or None when absent.

    Raises:
        InvalidDraftOrderRequest: If the price is not a non-negative decimal
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidDraftOrderRequest(f"price must be a decimal string, got {value!r}")

    if isinstance(value, str):
        # Decimal() also takes "1_000", "1e3" and "NaN"; Shopify takes none of them
        text = value.strip()
        if not _PLAIN_DECIMAL.fullmatch(text):
            raise InvalidDraftOrderRequest(f"price must be a decimal string, got {value!r}")
    else:
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidDraftOrderRequest(f"price must be a decimal string, got {value!r}")
        text = str(value)
        if "e" in text.lower():
            text = format(Decimal(text), "f")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidDraftOrderRequest(f"price must be a decimal string, got {value!r}")

    if amount < 0:
        raise InvalidDraftOrderRequest(f"price must be a non-negative amount, got {value!r}")
    return text


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_properties(properties: Any) -> List[Dict[str, str]]:
    """Convert a property mapping to Shopify's ``[{name, value}]`` list.

    Entries with a falsy value or a key starting with ``_`` are dropped.
    """
    if not isinstance(properties, Mapping):
        return []
    return [
        {"name": str(name), "value": _stringify(value)}
        for name, value in properties.items()
        if value and not str(name).startswith("_")
    ]


def build_line_item(item: Mapping[str, Any], default_title: str = "Custom Shade") -> Dict[str, Any]:
    """Translate one checkout line item into a draft order line item."""
    line_item: Dict[str, Any] = {
        "quantity": coerce_quantity(item.get("quantity")),
        "properties": build_properties(item.get("properties")),
    }
    price = normalize_price(item.get("price"))
    variant_id = coerce_variant_id(item.get("variant_id"))

    if variant_id is not None:
        line_item["variant_id"] = variant_id
        if price is not None:
            line_item["price"] = price
        return line_item

    if price is None:
        raise InvalidDraftOrderRequest("price is required for line items without a variant_id")

    title = item.get("title")
    line_item["title"] = str(title).strip() if title and str(title).strip() else default_title
    line_item["price"] = price
    line_item["requires_shipping"] = True
    line_item["taxable"] = True
    return line_item


def build_draft_order_payload(
    request: CreateDraftOrderRequest,
    defaults: Optional[DraftOrderDefaults] = None,
) -> Dict[str, Any]:
    """Assemble the ``{"draft_order": {...}}`` body for the create call."""
    defaults = defaults or DraftOrderDefaults()

    draft_order: Dict[str, Any] = {
        "line_items": [build_line_item(item, defaults.default_title) for item in request.line_items],
        "use_customer_default_address": True,
    }

    note = request.note or defaults.default_note
    if note:
        draft_order["note"] = note

    if request.customer_email:
        draft_order["customer"] = {"email": request.customer_email}

    if defaults.tags:
        draft_order["tags"] = ", ".join(defaults.tags)

    return {"draft_order": draft_order}
