"""Domain service: Stock.

The only legal ways to change reservation state.  Every operation is a
single conditional delta on one ledger row, so the check and the write
can never be interleaved with another caller's write to that row.

Derived quantities (sellable, totals) are never stored; nothing needs
recomputing after a mutation.
"""

from __future__ import annotations

import structlog

from ims.domain.exceptions import InsufficientStockError
from ims.domain.model.inventory import LedgerUpdate, StockDelta
from ims.domain.model.value_objects import Quantity
from ims.domain.repository.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


class StockService:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def reserve(self, size_id: str, location: str, qty: int) -> bool:
        """Hold *qty* units at a location if that many are sellable there.

        Returns False and changes nothing when ``on_hand - reserved`` is
        below *qty*.  Unknown and soft-deleted sizes raise
        EntityNotFoundError.
        """
        amount = Quantity(qty).value
        try:
            update = self._ledger.apply(
                size_id, location, StockDelta(reserved=amount), require_live=True
            )
        except InsufficientStockError as exc:
            logger.info(
                "Reservation refused",
                size_id=size_id,
                location=location,
                qty=amount,
                available=exc.available,
            )
            return False

        logger.debug(
            "Stock reserved",
            size_id=size_id,
            location=location,
            qty=amount,
            reserved=update.after.reserved,
        )
        return True

    def release_reservation(self, size_id: str, location: str, qty: int) -> LedgerUpdate:
        """Give back a hold.  Over-release floors ``reserved`` at zero."""
        amount = Quantity(qty).value
        update = self._ledger.apply(
            size_id, location, StockDelta(reserved=-amount), clamp=True
        )
        if update.clamped:
            logger.warning(
                "Release exceeded reservation; clamped at zero",
                size_id=size_id,
                location=location,
                qty=amount,
                reserved_before=update.before.reserved,
            )
        else:
            logger.debug("Reservation released", size_id=size_id, location=location, qty=amount)
        return update

    def commit_shipment(self, size_id: str, location: str, qty: int) -> LedgerUpdate:
        """Physically ship *qty* units, retiring the matching hold.

        Assumes a prior successful reserve of the same quantity.  Without
        one, the counters floor at zero and a warning is logged; the
        caller is not told.
        """
        amount = Quantity(qty).value
        update = self._ledger.apply(
            size_id,
            location,
            StockDelta(on_hand=-amount, reserved=-amount),
            clamp=True,
        )
        if update.clamped:
            logger.warning(
                "Shipment committed without a matching reservation; clamped at zero",
                size_id=size_id,
                location=location,
                qty=amount,
                on_hand_before=update.before.on_hand,
                reserved_before=update.before.reserved,
            )
        else:
            logger.info("Shipment committed", size_id=size_id, location=location, qty=amount)
        return update

    def expect(self, size_id: str, location: str, qty: int) -> LedgerUpdate:
        """Record *qty* units inbound on a purchase order."""
        amount = Quantity(qty).value
        update = self._ledger.apply(size_id, location, StockDelta(on_order=amount))
        logger.info("Stock on order", size_id=size_id, location=location, qty=amount)
        return update

    def receive(self, size_id: str, location: str, qty: int) -> LedgerUpdate:
        """Book *qty* units into on-hand, drawing down what was on order."""
        amount = Quantity(qty).value
        update = self._ledger.apply(
            size_id,
            location,
            StockDelta(on_hand=amount, on_order=-amount),
            clamp=True,
        )
        logger.info(
            "Stock received",
            size_id=size_id,
            location=location,
            qty=amount,
            unexpected=update.clamped,
        )
        return update
