"""Integration tests for reservation reconciliation."""

import threading

from ims.application.create_order import CreateOrderHandler
from ims.application.delete_order import DeleteOrderHandler
from ims.application.dto import CreateOrderCommand, OrderLineSpec
from ims.application.reconcile_reservations import ReconcileReservationsHandler
from ims.application.update_order_status import UpdateOrderStatusHandler
from ims.domain.model.inventory import InventoryRow
from ims.domain.model.order import Order, OrderStatus
from tests.fakes import (
    FakeCatalogRepository,
    FakeDatabase,
    FakeInventoryLedger,
    FakeOrderRepository,
)


def _setup():
    db = FakeDatabase()
    db.add_size("S1", [InventoryRow("WH-A", on_hand=10)])
    db.add_size("S2", [InventoryRow("WH-A", on_hand=10)])
    orders, ledger = FakeOrderRepository(db), FakeInventoryLedger(db)
    reconcile = ReconcileReservationsHandler(orders, FakeCatalogRepository(db), ledger)
    return db, orders, ledger, reconcile


def _place(orders, ledger, size_id: str, qty: int) -> str:
    line = OrderLineSpec("Tee", 100, qty, size_id, size_id, "WH-A")
    return CreateOrderHandler(orders, ledger).handle(CreateOrderCommand("Alice", [line])).order_number


class TestReconcileReservations:

    def test_consistent_ledger_reports_nothing(self):
        _, orders, ledger, reconcile = _setup()
        _place(orders, ledger, "S1", 3)
        assert reconcile.handle() == []

    def test_deleted_order_leaves_orphan(self):
        _, orders, ledger, reconcile = _setup()
        number = _place(orders, ledger, "S1", 3)
        _place(orders, ledger, "S1", 2)
        DeleteOrderHandler(orders).handle(number)

        drifts = reconcile.handle()
        assert len(drifts) == 1
        drift = drifts[0]
        assert (drift.size_id, drift.expected, drift.actual, drift.drift) == ("S1", 2, 5, 3)
        assert drift.released == 0
        assert ledger.get_row("S1", "WH-A").reserved == 5

    def test_apply_releases_orphaned_holds(self):
        _, orders, ledger, reconcile = _setup()
        number = _place(orders, ledger, "S1", 3)
        DeleteOrderHandler(orders).handle(number)

        drifts = reconcile.handle(apply=True)
        assert drifts[0].released == 3
        assert ledger.get_row("S1", "WH-A").reserved == 0
        assert reconcile.handle() == []

    def test_delivered_orders_expect_nothing(self):
        _, orders, ledger, reconcile = _setup()
        number = _place(orders, ledger, "S2", 4)
        UpdateOrderStatusHandler(orders, ledger).handle(number, OrderStatus.DELIVERED)
        assert reconcile.handle() == []

    def test_missing_hold_is_reported_not_raised(self):
        db, orders, ledger, reconcile = _setup()
        _place(orders, ledger, "S2", 4)
        db.rows["S2"]["WH-A"] = InventoryRow("WH-A", on_hand=10, reserved=1)

        drifts = reconcile.handle(apply=True)
        assert drifts[0].drift == -3
        assert drifts[0].released == 0
        assert ledger.get_row("S2", "WH-A").reserved == 1

    def test_waits_for_an_order_being_created(self):
        db, orders, ledger, reconcile = _setup()
        results = []
        racer = threading.Thread(target=lambda: results.append(reconcile.handle(apply=True)))

        class RacingOrderRepository(FakeOrderRepository):
            def add(self, order: Order) -> None:
                # Holds are taken, the order is not yet recorded.
                racer.start()
                racer.join(timeout=0.2)
                super().add(order)

        _place(RacingOrderRepository(db), ledger, "S1", 3)
        racer.join()

        assert results == [[]]
        assert ledger.get_row("S1", "WH-A").reserved == 3
