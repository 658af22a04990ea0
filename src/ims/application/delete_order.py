"""Application service: Delete Order use case (admin override).

Removes the order document outright.  Its reservations are NOT
released; the held stock stays reserved until reconciliation finds it.
"""

from __future__ import annotations

import structlog

from ims.domain.exceptions import EntityNotFoundError
from ims.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class DeleteOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_number: str) -> None:
        with self._order_repo.atomic():
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise EntityNotFoundError(f"Order {order_number} not found")
            self._order_repo.delete(order_number)

        if order.holds_reservations and order.pending_shipments():
            logger.warning(
                "Order deleted while holding reservations",
                order_number=order_number,
                status=order.status.value,
                lines=len(order.pending_shipments()),
            )
        else:
            logger.info("Order deleted", order_number=order_number)
