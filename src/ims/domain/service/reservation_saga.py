"""Compensating-action rollback for multi-line reservations.

The ledger has no multi-row transaction.  A saga reserves one line at a
time and keeps an ordered log of every hold it acquired; if a later line
fails, the logged holds are released again in the order they were
acquired.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from ims.domain.exceptions import DomainException, InsufficientStockError
from ims.domain.repository.inventory_ledger import InventoryLedger
from ims.domain.service.stock_service import StockService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Hold:
    size_id: str
    location: str
    qty: int


class ReservationSaga:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger
        self._stock = StockService(ledger)
        self._holds: list[Hold] = []

    @property
    def holds(self) -> list[Hold]:
        return list(self._holds)

    def reserve(self, size_id: str, location: str, qty: int) -> None:
        """Reserve one line or compensate everything acquired so far.

        Raises InsufficientStockError naming the failing size/location
        when the reservation is refused.  Any other domain error (an
        unknown size, a bad quantity) also compensates before propagating.
        """
        try:
            reserved = self._stock.reserve(size_id, location, qty)
        except DomainException:
            self.compensate()
            raise

        if not reserved:
            self.compensate()
            row = self._ledger.get_row(size_id, location)
            raise InsufficientStockError(
                size_id,
                location,
                requested=qty,
                available=row.available if row else 0,
            )
        self._holds.append(Hold(size_id, location, qty))

    def compensate(self) -> None:
        """Release every logged hold, oldest first, and clear the log."""
        if self._holds:
            logger.info("Rolling back reservations", holds=len(self._holds))
        while self._holds:
            hold = self._holds.pop(0)
            self._stock.release_reservation(hold.size_id, hold.location, hold.qty)
