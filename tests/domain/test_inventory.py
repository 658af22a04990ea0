"""Unit tests for inventory rows, deltas and rollups."""

import pytest

from ims.domain.exceptions import InsufficientStockError, InvariantViolationError
from ims.domain.model.inventory import InventoryRow, LedgerUpdate, StockDelta, StockTotals


class TestInventoryRowConditionalDelta:

    def test_reserve_within_available(self):
        row = InventoryRow(location="A", on_hand=10, reserved=4)
        after = row.apply(StockDelta(reserved=6), "S1")
        assert after.reserved == 10
        assert after.available == 0

    def test_reserve_beyond_available_rejected(self):
        row = InventoryRow(location="A", on_hand=10, reserved=4)
        with pytest.raises(InsufficientStockError, match="Insufficient stock for size S1 at A") as exc:
            row.apply(StockDelta(reserved=7), "S1")
        assert exc.value.available == 6
        assert exc.value.requested == 7

    def test_failed_delta_leaves_row_untouched(self):
        row = InventoryRow(location="A", on_hand=1, reserved=1)
        with pytest.raises(InsufficientStockError):
            row.apply(StockDelta(reserved=1), "S1")
        assert row == InventoryRow(location="A", on_hand=1, reserved=1)

    def test_on_hand_below_reserved_rejected(self):
        row = InventoryRow(location="A", on_hand=5, reserved=5)
        with pytest.raises(InsufficientStockError):
            row.apply(StockDelta(on_hand=-1), "S1")

    def test_negative_on_order_rejected(self):
        row = InventoryRow(location="A", on_order=2)
        with pytest.raises(InsufficientStockError):
            row.apply(StockDelta(on_order=-3), "S1")

    def test_zero_baseline(self):
        after = InventoryRow(location="A").apply(StockDelta(on_hand=3, on_order=2), "S1")
        assert after == InventoryRow(location="A", on_hand=3, on_order=2, reserved=0)


class TestInventoryRowClamp:

    def test_over_release_floors_at_zero(self):
        row = InventoryRow(location="A", on_hand=10, reserved=2)
        after = row.apply(StockDelta(reserved=-5), "S1", clamp=True)
        assert after.reserved == 0
        assert after.on_hand == 10

    def test_commit_without_reservation_floors_both(self):
        row = InventoryRow(location="A", on_hand=3, reserved=0)
        after = row.apply(StockDelta(on_hand=-5, reserved=-5), "S1", clamp=True)
        assert after.on_hand == 0
        assert after.reserved == 0

    def test_clamp_cannot_oversubscribe(self):
        row = InventoryRow(location="A", on_hand=1, reserved=1)
        with pytest.raises(InvariantViolationError):
            row.apply(StockDelta(reserved=1), "S1", clamp=True)

    def test_negative_counter_cannot_be_constructed(self):
        with pytest.raises(InvariantViolationError, match="cannot be negative"):
            InventoryRow(location="A", on_hand=-1)


class TestLedgerUpdate:

    def test_full_delta_is_not_clamped(self):
        before = InventoryRow(location="A", on_hand=10, reserved=4)
        delta = StockDelta(on_hand=-4, reserved=-4)
        update = LedgerUpdate("S1", delta, before, before.apply(delta, "S1", clamp=True))
        assert not update.clamped

    def test_partial_delta_is_clamped(self):
        before = InventoryRow(location="A", on_hand=10, reserved=1)
        delta = StockDelta(reserved=-4)
        update = LedgerUpdate("S1", delta, before, before.apply(delta, "S1", clamp=True))
        assert update.clamped


class TestStockTotals:

    def test_rollup_across_locations(self):
        totals = StockTotals.of([
            InventoryRow(location="A", on_hand=5, reserved=2),
            InventoryRow(location="B", on_hand=3, reserved=1, on_order=4),
        ])
        assert totals.total_quantity == 8
        assert totals.reserved_total == 3
        assert totals.on_order_total == 4
        assert totals.sellable_quantity == 5

    def test_no_rows_is_zero(self):
        totals = StockTotals.of([])
        assert totals == StockTotals(0, 0, 0)
        assert totals.sellable_quantity == 0

    def test_sellable_never_negative(self):
        assert StockTotals(total_quantity=2, reserved_total=5).sellable_quantity == 0
