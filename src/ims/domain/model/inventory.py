"""Inventory rows — per (size, location) stock counters.

Each Size owns one InventoryRow per location.  A row knows how much is
physically on hand, how much of that is held by reservations, and how
much is inbound on purchase orders.  Rows are immutable: every change is
a ``StockDelta`` applied to produce a new row, so a failed change leaves
the original untouched.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.domain.exceptions import InsufficientStockError, InvariantViolationError


@dataclass(frozen=True)
class StockDelta:
    """Signed change to the three counters of one row."""

    on_hand: int = 0
    reserved: int = 0
    on_order: int = 0


@dataclass(frozen=True)
class InventoryRow:
    """Stock counters for one location of one size.

    Invariants:
    - ``on_hand``, ``on_order`` and ``reserved`` are never negative
    - ``reserved`` never exceeds ``on_hand`` once a change is committed
    """

    location: str
    on_hand: int = 0
    on_order: int = 0
    reserved: int = 0

    def __post_init__(self) -> None:
        for name in ("on_hand", "on_order", "reserved"):
            if getattr(self, name) < 0:
                raise InvariantViolationError(
                    f"{name} cannot be negative at {self.location} "
                    f"(got {getattr(self, name)})"
                )

    @property
    def available(self) -> int:
        """What may legally be reserved next at this location."""
        return max(self.on_hand - self.reserved, 0)

    def apply(self, delta: StockDelta, size_id: str, clamp: bool = False) -> InventoryRow:
        """Return the row that results from applying *delta*.

        Without *clamp* the change is conditional: if any counter would go
        negative, or ``reserved`` would exceed ``on_hand``, nothing is
        applied and InsufficientStockError is raised.  With *clamp* each
        counter floors at zero instead.
        """
        on_hand = self.on_hand + delta.on_hand
        reserved = self.reserved + delta.reserved
        on_order = self.on_order + delta.on_order

        if clamp:
            on_hand, reserved, on_order = max(on_hand, 0), max(reserved, 0), max(on_order, 0)
            if reserved > on_hand:
                raise InvariantViolationError(
                    f"Reserved would exceed on-hand for size {size_id} at {self.location}"
                )
        elif min(on_hand, reserved, on_order) < 0 or reserved > on_hand:
            raise InsufficientStockError(
                size_id,
                self.location,
                requested=max(delta.reserved, -delta.on_hand, 0),
                available=self.available,
            )

        return InventoryRow(
            location=self.location,
            on_hand=on_hand,
            on_order=on_order,
            reserved=reserved,
        )


@dataclass(frozen=True)
class LedgerUpdate:
    """The before/after pair of a single ledger mutation."""

    size_id: str
    delta: StockDelta
    before: InventoryRow
    after: InventoryRow

    @property
    def clamped(self) -> bool:
        """True if a counter floored at zero instead of taking the full delta."""
        return (
            self.after.on_hand - self.before.on_hand != self.delta.on_hand
            or self.after.reserved - self.before.reserved != self.delta.reserved
            or self.after.on_order - self.before.on_order != self.delta.on_order
        )


@dataclass(frozen=True)
class StockTotals:
    """Quantities rolled up across every location of a size."""

    total_quantity: int = 0
    reserved_total: int = 0
    on_order_total: int = 0

    @property
    def sellable_quantity(self) -> int:
        return max(self.total_quantity - self.reserved_total, 0)

    @staticmethod
    def of(rows: list[InventoryRow]) -> StockTotals:
        return StockTotals(
            total_quantity=sum(r.on_hand for r in rows),
            reserved_total=sum(r.reserved for r in rows),
            on_order_total=sum(r.on_order for r in rows),
        )
