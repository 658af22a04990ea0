"""Application service: Reconcile Reservations use case.

The admin delete override removes an order but leaves its stock
reserved, with no order to own it.  A ledger edited by hand, or a store
without transactions, can drift the same way.  This use case
recomputes what *should* be reserved from the open orders and compares
it with what the ledger holds.

Expected reserved for a (size, location) is the quantity of every
uncommitted line of every order that is not yet Delivered.  A positive
drift is an orphaned hold and can be released; a negative drift (the
ledger holds less than the orders need) is only reported, because
raising a reservation could oversubscribe stock.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

import structlog

from ims.domain.repository.catalog_repository import CatalogRepository
from ims.domain.repository.inventory_ledger import InventoryLedger
from ims.domain.repository.order_repository import OrderRepository
from ims.domain.service.stock_service import StockService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReservationDrift:
    size_id: str
    location: str
    expected: int
    actual: int
    released: int = 0

    @property
    def drift(self) -> int:
        return self.actual - self.expected


class ReconcileReservationsHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        catalog: CatalogRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._order_repo = order_repo
        self._catalog = catalog
        self._ledger = ledger

    def handle(self, apply: bool = False) -> list[ReservationDrift]:
        drifts: list[ReservationDrift] = []
        # Order creation holds the same unit of work while its saga runs.
        with self._order_repo.atomic():
            expected = self._expected_reservations()
            actual = self._actual_reservations()

            svc = StockService(self._ledger)
            for size_id, location in sorted(set(expected) | set(actual)):
                want = expected.get((size_id, location), 0)
                have = actual.get((size_id, location), 0)
                if want == have:
                    continue

                released = 0
                if apply and have > want:
                    svc.release_reservation(size_id, location, have - want)
                    released = have - want
                drifts.append(ReservationDrift(size_id, location, want, have, released))

        for d in drifts:
            logger.warning(
                "Reservation drift",
                size_id=d.size_id,
                location=d.location,
                expected=d.expected,
                actual=d.actual,
                released=d.released,
            )
        return drifts

    def _expected_reservations(self) -> dict[tuple[str, str], int]:
        expected: dict[tuple[str, str], int] = defaultdict(int)
        for order in self._order_repo.list_all():
            if not order.holds_reservations:
                continue
            for line in order.pending_shipments():
                expected[(line.size_id, line.location)] += line.quantity.value
        return dict(expected)

    def _actual_reservations(self) -> dict[tuple[str, str], int]:
        actual: dict[tuple[str, str], int] = {}
        for product in self._catalog.list_products():
            for variant in self._catalog.variants_of(product.id):
                for size in self._catalog.sizes_of(variant.id):
                    for row in self._ledger.rows_for(size.id):
                        if row.reserved:
                            actual[(size.id, row.location)] = row.reserved
        return actual
