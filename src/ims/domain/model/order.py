"""Order aggregate — the customer-facing side of the reservation engine.

The Order owns its lines.  It does not touch stock itself: the
application handlers drive the Stock Service and then record the
outcome on the Order (which lines have been committed, which status the
order is in).
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ims.domain.exceptions import ValidationError
from ims.domain.model.value_objects import Price, Quantity


class OrderStatus(Enum):
    IN_HAND = "In Hand"
    PROCESSING = "Processing"
    DELIVERED = "Delivered"


def generate_order_number() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random.randrange(10000)}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OrderLine:
    """One purchased size at one location, with its price snapshot.

    ``product_id`` is the size the customer picked (the field keeps its
    historical name); ``size_id`` is the size the stock was reserved
    against and is the same id unless the request named one explicitly.
    """

    name: str
    price: Price
    quantity: Quantity
    product_id: str
    size_id: str
    location: str
    committed: bool = False

    @property
    def line_total(self) -> Price:
        return self.price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders; it enforces the creation
    rules.  ``__init__`` stays simple so the repository can reconstitute
    persisted orders without re-validating.
    """

    order_number: str
    customer: str
    lines: list[OrderLine]
    shipping_address: str | None = None
    status: OrderStatus = OrderStatus.IN_HAND
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer: str,
        lines: list[OrderLine],
        shipping_address: str | None = None,
        total_amount: int | None = None,
    ) -> Order:
        if not customer or not customer.strip():
            raise ValidationError("Customer is required")
        if not lines:
            raise ValidationError("Order must contain at least one line")

        order = Order(
            order_number=order_number,
            customer=customer.strip(),
            lines=list(lines),
            shipping_address=shipping_address,
        )

        if total_amount is not None and total_amount != order.total_amount.minor:
            raise ValidationError(
                f"totalAmount {total_amount} does not match line total "
                f"{order.total_amount.minor}"
            )
        return order

    # --- State transitions ----------------------------------------------------

    def ensure_can_transition(self, status: OrderStatus) -> None:
        """Delivered is terminal; every other move is allowed."""
        if self.status == OrderStatus.DELIVERED:
            raise ValidationError(
                f"Order {self.order_number} is already {OrderStatus.DELIVERED.value}"
            )

    def transition_to(self, status: OrderStatus) -> None:
        """Record a status change.

        Moving to DELIVERED must happen only after every line's shipment
        has been committed (coordinated by the application handler).
        """
        self.ensure_can_transition(status)
        if status == OrderStatus.DELIVERED and self.pending_shipments():
            raise ValidationError(
                f"Order {self.order_number} still has uncommitted lines"
            )
        self.status = status
        self.updated_at = _now()

    # --- Computed properties --------------------------------------------------

    @property
    def total_amount(self) -> Price:
        result = Price.zero()
        for line in self.lines:
            result = result + line.line_total
        return result

    def pending_shipments(self) -> list[OrderLine]:
        return [line for line in self.lines if not line.committed]

    @property
    def holds_reservations(self) -> bool:
        """True while the order's uncommitted lines still hold stock."""
        return self.status != OrderStatus.DELIVERED
