"""Data Transfer Objects — plain containers that cross layer boundaries.

Commands carry normalized requests into the application layer; output
DTOs carry results back out without exposing domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ims.domain.model.order import Order


# --- Commands (input) ---------------------------------------------------------


@dataclass(frozen=True)
class OrderLineSpec:
    """One requested line, already resolved to a size and a location."""

    name: str
    price: int
    quantity: int
    product_id: str
    size_id: str
    location: str


@dataclass(frozen=True)
class CreateOrderCommand:
    customer: str
    lines: list[OrderLineSpec]
    shipping_address: str | None = None
    total_amount: int | None = None


@dataclass(frozen=True)
class InventoryRowSpec:
    location: str
    on_hand: int
    on_order: int = 0
    reserved: int = 0


@dataclass(frozen=True)
class SizeSpec:
    label: str
    barcode: str
    inventory: list[InventoryRowSpec] = field(default_factory=list)


@dataclass(frozen=True)
class VariantSpec:
    sku: str
    color_name: str
    color_code: str | None = None
    sizes: list[SizeSpec] = field(default_factory=list)


@dataclass(frozen=True)
class CreateProductCommand:
    style_number: str
    title: str
    price: int
    status: str | None = None
    description: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    variants: list[VariantSpec] = field(default_factory=list)


# --- Output -------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineDTO:
    name: str
    price: int
    quantity: int
    product_id: str
    size_id: str
    location: str
    line_total: int
    committed: bool


@dataclass(frozen=True)
class OrderDTO:
    order_number: str
    customer: str
    status: str
    lines: list[OrderLineDTO]
    total_amount: int
    shipping_address: str | None
    created_at: str
    updated_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            order_number=order.order_number,
            customer=order.customer,
            status=order.status.value,
            lines=[
                OrderLineDTO(
                    name=line.name,
                    price=line.price.minor,
                    quantity=line.quantity.value,
                    product_id=line.product_id,
                    size_id=line.size_id,
                    location=line.location,
                    line_total=line.line_total.minor,
                    committed=line.committed,
                )
                for line in order.lines
            ],
            total_amount=order.total_amount.minor,
            shipping_address=order.shipping_address,
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
            updated_at=order.updated_at.strftime("%Y-%m-%d %H:%M UTC"),
        )
