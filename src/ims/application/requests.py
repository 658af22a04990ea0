"""Request normalization — untyped JSON bodies in, commands out.

Clients send line items either flat (``{"name", "price", "quantity",
"product_id"}``) or nested (``{"product": {...}, "quantity"}``), and
spell ids in several ways.  Everything is folded into one canonical
command here so nothing past this module branches on input shape.
Malformed bodies are rejected with ValidationError before any stock is
touched.
"""

from __future__ import annotations

from typing import Any

from ims.application.dto import (
    CreateOrderCommand,
    CreateProductCommand,
    InventoryRowSpec,
    OrderLineSpec,
    SizeSpec,
    VariantSpec,
)
from ims.domain.exceptions import ValidationError
from ims.domain.model.order import OrderStatus

_MISSING = object()

_PRODUCT_ID_KEYS = ("product_id", "productId", "_id", "id")
_SIZE_ID_KEYS = ("sizeId", "size_id")

_STATUS_ALIASES = {
    "in hand": OrderStatus.IN_HAND,
    "in_hand": OrderStatus.IN_HAND,
    "processing": OrderStatus.PROCESSING,
    "delivered": OrderStatus.DELIVERED,
}


def _require_mapping(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValidationError(f"{what} must be an object")
    return raw


def _pick(fields: dict[str, Any], *names: str, default: Any = _MISSING) -> Any:
    for name in names:
        if fields.get(name) is not None:
            return fields[name]
    if default is _MISSING:
        raise ValidationError(f"Missing required field '{names[0]}'")
    return default


def _as_int(value: Any, what: str, minimum: int) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{what} must be an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError(f"{what} must be an integer, got {value!r}")
    if value < minimum:
        raise ValidationError(f"{what} must be at least {minimum}, got {value}")
    return value


def _as_str(value: Any, what: str) -> str:
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise ValidationError(f"{what} must be a string")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"{what} is required")
    return text


def _optional_str(fields: dict[str, Any], *names: str) -> str | None:
    value = _pick(fields, *names, default=None)
    return None if value is None else _as_str(value, names[0])


# --- Orders -------------------------------------------------------------------


def _line_fields(raw: Any) -> dict[str, Any]:
    """Flatten ``{"product": {...}, ...}`` onto one level; outer keys win."""
    raw = _require_mapping(raw, "Order line")
    nested = raw.get("product")
    if isinstance(nested, dict):
        outer = {k: v for k, v in raw.items() if k != "product"}
        return {**nested, **outer}
    return raw


def normalize_order_line(raw: Any, default_location: str) -> OrderLineSpec:
    fields = _line_fields(raw)
    product_id = _as_str(_pick(fields, *_PRODUCT_ID_KEYS), "product_id")
    size_id = _pick(fields, *_SIZE_ID_KEYS, default=None)
    location = _pick(fields, "location", default=None)
    return OrderLineSpec(
        name=_as_str(_pick(fields, "name"), "name"),
        price=_as_int(_pick(fields, "price"), "price", minimum=0),
        quantity=_as_int(_pick(fields, "quantity"), "quantity", minimum=1),
        product_id=product_id,
        size_id=product_id if size_id is None else _as_str(size_id, "sizeId"),
        location=default_location if location is None else _as_str(location, "location"),
    )


def normalize_order_request(payload: Any, default_location: str) -> CreateOrderCommand:
    body = _require_mapping(payload, "Order request")
    raw_lines = _pick(body, "products", "items")
    if not isinstance(raw_lines, list) or not raw_lines:
        raise ValidationError("products must be a non-empty list")

    total = _pick(body, "totalAmount", "total_amount", default=None)
    return CreateOrderCommand(
        customer=_as_str(_pick(body, "customer"), "customer"),
        lines=[normalize_order_line(raw, default_location) for raw in raw_lines],
        shipping_address=_optional_str(body, "shippingAddress", "shipping_address"),
        total_amount=None if total is None else _as_int(total, "totalAmount", minimum=0),
    )


def normalize_status(value: Any) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    text = _as_str(value, "status")
    status = _STATUS_ALIASES.get(text.lower())
    if status is None:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Unknown order status '{text}' (expected one of: {allowed})")
    return status


def normalize_status_request(payload: Any) -> tuple[str, OrderStatus]:
    body = _require_mapping(payload, "Status request")
    order_number = _as_str(_pick(body, "orderNumber", "order_number"), "orderNumber")
    return order_number, normalize_status(_pick(body, "status"))


# --- Catalog ------------------------------------------------------------------


def _inventory_row(raw: Any) -> InventoryRowSpec:
    fields = _require_mapping(raw, "Inventory row")
    return InventoryRowSpec(
        location=_as_str(_pick(fields, "location"), "location"),
        on_hand=_as_int(_pick(fields, "onHand", "on_hand"), "onHand", minimum=0),
        on_order=_as_int(_pick(fields, "onOrder", "on_order", default=0), "onOrder", minimum=0),
        reserved=_as_int(_pick(fields, "reserved", default=0), "reserved", minimum=0),
    )


def _size(raw: Any) -> SizeSpec:
    fields = _require_mapping(raw, "Size")
    return SizeSpec(
        label=_as_str(_pick(fields, "label"), "label"),
        barcode=_as_str(_pick(fields, "barcode"), "barcode"),
        inventory=[_inventory_row(r) for r in _pick(fields, "inventory", default=[])],
    )


def _variant(raw: Any) -> VariantSpec:
    fields = _require_mapping(raw, "Variant")
    color = _pick(fields, "color")
    if isinstance(color, str):
        color = {"name": color}
    color = _require_mapping(color, "color")
    return VariantSpec(
        sku=_as_str(_pick(fields, "sku"), "sku"),
        color_name=_as_str(_pick(color, "name"), "color.name"),
        color_code=_optional_str(color, "code"),
        sizes=[_size(s) for s in _pick(fields, "sizes", default=[])],
    )


def normalize_product_request(payload: Any) -> CreateProductCommand:
    """Accept ``{"product": {...}, "variants": [...]}`` or a flat product body."""
    body = _require_mapping(payload, "Product request")
    product = body.get("product", body)
    product = _require_mapping(product, "product")
    attributes = _pick(product, "attributes", default={})
    return CreateProductCommand(
        style_number=_as_str(_pick(product, "styleNumber", "style_number"), "styleNumber"),
        title=_as_str(_pick(product, "title"), "title"),
        price=_as_int(_pick(product, "price"), "price", minimum=0),
        status=_optional_str(product, "status"),
        description=_optional_str(product, "description"),
        attributes=dict(_require_mapping(attributes, "attributes")),
        variants=[_variant(v) for v in _pick(body, "variants", default=[])],
    )
