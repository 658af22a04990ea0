"""Application service: Create Order use case.

Reserves stock for every line before the order exists.  Reservation is a
saga over single-row ledger updates: if any line is refused, the lines
already reserved are released again and no order is persisted, so a
rejected request leaves stock exactly as it found it.

Reserving and recording the order run as one unit of work on the order
repository, so reconciliation never sees the saga's holds without the
order that owns them.
"""

from __future__ import annotations

import structlog

from ims.application.dto import CreateOrderCommand, OrderDTO
from ims.domain.model.order import Order, OrderLine, generate_order_number
from ims.domain.model.value_objects import Price, Quantity
from ims.domain.repository.inventory_ledger import InventoryLedger
from ims.domain.repository.order_repository import OrderRepository
from ims.domain.service.reservation_saga import ReservationSaga

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger

    def handle(self, command: CreateOrderCommand) -> OrderDTO:
        """Create an order.

        Steps:
        1. Build the Order (validates customer, lines, declared total).
        2. Reserve each line in request order; on the first refusal,
           release the earlier lines and raise InsufficientStockError.
        3. Insert the order under a number no other order holds.
        """
        lines = [
            OrderLine(
                name=spec.name,
                price=Price(spec.price),
                quantity=Quantity(spec.quantity),
                product_id=spec.product_id,
                size_id=spec.size_id,
                location=spec.location,
            )
            for spec in command.lines
        ]

        with self._order_repo.atomic():
            order = Order.create(
                order_number=self._unused_order_number(),
                customer=command.customer,
                lines=lines,
                shipping_address=command.shipping_address,
                total_amount=command.total_amount,
            )

            saga = ReservationSaga(self._ledger)
            for line in order.lines:
                saga.reserve(line.size_id, line.location, line.quantity.value)

            try:
                self._order_repo.add(order)
            except Exception:
                saga.compensate()
                raise

        logger.info(
            "Order created",
            order_number=order.order_number,
            lines=len(order.lines),
            total_amount=order.total_amount.minor,
        )
        return OrderDTO.from_order(order)

    def _unused_order_number(self) -> str:
        while True:
            number = generate_order_number()
            if self._order_repo.get_by_number(number) is None:
                return number
