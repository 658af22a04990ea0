"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from ims.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Run a block of reads and writes as one indivisible unit.

        Ledger updates made inside the block are part of the same unit:
        if the block raises, neither the order nor the stock changes.
        """

    @abstractmethod
    def get_by_number(self, order_number: str) -> Order | None:
        """Return an order by its order number, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, newest first."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order; ValidationError if the number is taken."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist an updated order."""

    @abstractmethod
    def delete(self, order_number: str) -> bool:
        """Remove an order; return False if it did not exist."""
