"""Application service: Update Order Status use case.

Moving an order to Delivered commits the shipment of every line against
the ledger.  The status check, the commits and the order write run as
one unit of work on the order repository: two deliveries of the same
order cannot both pass the check, and a delivery that fails partway
leaves neither stock nor order changed.  Every other transition is a
metadata write.
"""

from __future__ import annotations

import structlog

from ims.application.dto import OrderDTO
from ims.domain.exceptions import EntityNotFoundError
from ims.domain.model.order import OrderStatus
from ims.domain.repository.inventory_ledger import InventoryLedger
from ims.domain.repository.order_repository import OrderRepository
from ims.domain.service.stock_service import StockService

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger

    def handle(self, order_number: str, status: OrderStatus) -> OrderDTO:
        with self._order_repo.atomic():
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise EntityNotFoundError(f"Order {order_number} not found")

            order.ensure_can_transition(status)

            if status == OrderStatus.DELIVERED:
                svc = StockService(self._ledger)
                for line in order.pending_shipments():
                    svc.commit_shipment(line.size_id, line.location, line.quantity.value)
                    line.committed = True

            previous = order.status
            order.transition_to(status)
            self._order_repo.save(order)

        logger.info(
            "Order status changed",
            order_number=order.order_number,
            previous=previous.value,
            status=status.value,
        )
        return OrderDTO.from_order(order)
