"""JSON-document-backed implementation of OrderRepository."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from ims.domain.exceptions import ValidationError
from ims.domain.model.order import Order, OrderLine, OrderStatus
from ims.domain.model.value_objects import Price, Quantity
from ims.domain.repository.order_repository import OrderRepository
from ims.infrastructure.persistence.json_store import JsonDocumentStore, find, upsert


class JsonOrderRepository(OrderRepository):

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    # --- OrderRepository interface --------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._store.transaction():
            yield

    def get_by_number(self, order_number: str) -> Order | None:
        _, raw = find(self._store.read()["orders"], "order_number", order_number)
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._store.read()["orders"]]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def add(self, order: Order) -> None:
        with self._store.transaction() as document:
            i, _ = find(document["orders"], "order_number", order.order_number)
            if i >= 0:
                raise ValidationError(f"Order {order.order_number} already exists")
            document["orders"].append(self._to_raw(order))

    def save(self, order: Order) -> None:
        with self._store.transaction() as document:
            upsert(document["orders"], "order_number", self._to_raw(order))

    def delete(self, order_number: str) -> bool:
        with self._store.transaction() as document:
            i, _ = find(document["orders"], "order_number", order_number)
            if i < 0:
                return False
            del document["orders"][i]
            return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict[str, Any]:
        return {
            "order_number": order.order_number,
            "customer": order.customer,
            "status": order.status.value,
            "shipping_address": order.shipping_address,
            "total_amount": order.total_amount.minor,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "products": [
                {
                    "name": line.name,
                    "price": line.price.minor,
                    "quantity": line.quantity.value,
                    "product_id": line.product_id,
                    "size_id": line.size_id,
                    "location": line.location,
                    "committed": line.committed,
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict[str, Any]) -> Order:
        lines = [
            OrderLine(
                name=item["name"],
                price=Price(item["price"]),
                quantity=Quantity(item["quantity"]),
                product_id=item["product_id"],
                size_id=item.get("size_id", item["product_id"]),
                location=item["location"],
                committed=item.get("committed", False),
            )
            for item in raw["products"]
        ]
        return Order(
            order_number=raw["order_number"],
            customer=raw["customer"],
            lines=lines,
            shipping_address=raw.get("shipping_address"),
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw.get("updated_at", raw["created_at"])),
        )
