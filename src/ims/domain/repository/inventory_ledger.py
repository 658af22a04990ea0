"""Abstract Inventory Ledger — the single source of truth for stock.

Rows are keyed by (size id, location).  Implementations must execute
``apply`` as one indivisible operation: the precondition check and the
write cannot be separated by another caller's write to the same row.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ims.domain.model.inventory import InventoryRow, LedgerUpdate, StockDelta


class InventoryLedger(ABC):

    @abstractmethod
    def get_row(self, size_id: str, location: str) -> InventoryRow | None:
        """Return the row for a location, or None (zero stock there)."""

    @abstractmethod
    def rows_for(self, size_id: str) -> list[InventoryRow]:
        """Return every row of a size (empty if the size has none)."""

    @abstractmethod
    def apply(
        self,
        size_id: str,
        location: str,
        delta: StockDelta,
        clamp: bool = False,
        require_live: bool = False,
    ) -> LedgerUpdate:
        """Atomically apply a delta to one row.

        A missing row is created from a zero baseline.  Raises
        EntityNotFoundError for an unknown size (or a soft-deleted one
        when *require_live*), and InsufficientStockError when the
        conditional delta is refused; nothing is written in either case.
        """

    @abstractmethod
    def seed(self, size_id: str, rows: list[InventoryRow]) -> None:
        """Set the initial rows of a newly created size."""
