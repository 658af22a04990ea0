"""Application service: Show/List Orders use cases (queries)."""

from __future__ import annotations

from ims.application.dto import OrderDTO
from ims.domain.exceptions import EntityNotFoundError
from ims.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_number: str) -> OrderDTO:
        order = self._order_repo.get_by_number(order_number)
        if order is None:
            raise EntityNotFoundError(f"Order {order_number} not found")
        return OrderDTO.from_order(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self) -> list[OrderDTO]:
        return [OrderDTO.from_order(o) for o in self._order_repo.list_all()]
