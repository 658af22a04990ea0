"""Application service: direct stock movements on one (size, location).

Operator-facing entry point to the Stock Service, used for manual holds,
goods-in, and purchase orders outside the order flow.
"""

from __future__ import annotations

from enum import Enum

from ims.domain.exceptions import InsufficientStockError
from ims.domain.model.inventory import InventoryRow
from ims.domain.repository.inventory_ledger import InventoryLedger
from ims.domain.service.stock_service import StockService


class StockAction(Enum):
    RESERVE = "reserve"
    RELEASE = "release"
    COMMIT = "commit"
    RECEIVE = "receive"
    EXPECT = "expect"


class AdjustStockHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self, action: StockAction, size_id: str, location: str, qty: int) -> InventoryRow:
        """Apply one movement and return the row as it stands afterwards."""
        svc = StockService(self._ledger)

        if action == StockAction.RESERVE:
            reserved = svc.reserve(size_id, location, qty)
            row = self._ledger.get_row(size_id, location) or InventoryRow(location=location)
            if not reserved:
                raise InsufficientStockError(
                    size_id, location, requested=qty, available=row.available
                )
            return row

        movements = {
            StockAction.RELEASE: svc.release_reservation,
            StockAction.COMMIT: svc.commit_shipment,
            StockAction.RECEIVE: svc.receive,
            StockAction.EXPECT: svc.expect,
        }
        return movements[action](size_id, location, qty).after
