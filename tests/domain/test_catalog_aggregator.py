"""Unit tests for the read-side catalog rollups."""

from ims.domain.model.catalog import ProductStatus
from ims.domain.model.inventory import InventoryRow
from ims.domain.service.catalog_aggregator import CatalogAggregator
from tests.fakes import FakeCatalogRepository, FakeDatabase, FakeInventoryLedger


def _setup() -> tuple[CatalogAggregator, FakeDatabase]:
    db = FakeDatabase()
    db.add_product("P1", style_number="ST-1")
    db.add_variant("V1", "P1", sku="TEE-RED")
    db.add_variant("V2", "P1", sku="TEE-BLUE")
    db.add_size(
        "S1",
        [InventoryRow("WH-B", on_hand=5, reserved=2), InventoryRow("WH-A", on_hand=3, reserved=1, on_order=4)],
        variant_id="V1",
        label="M",
    )
    db.add_size("S2", [InventoryRow("WH-A", on_hand=1)], variant_id="V1", label="L")
    aggregator = CatalogAggregator(FakeCatalogRepository(db), FakeInventoryLedger(db))
    return aggregator, db


class TestSizeView:

    def test_totals_roll_up_across_locations(self):
        aggregator, _ = _setup()
        view = aggregator.size_view("S1")
        assert view.total_quantity == 8
        assert view.reserved_total == 3
        assert view.sellable_quantity == 5
        assert view.on_order_total == 4

    def test_rows_sorted_by_location(self):
        aggregator, _ = _setup()
        view = aggregator.size_view("S1")
        assert [r.location for r in view.inventory] == ["WH-A", "WH-B"]

    def test_deleted_size_invisible(self):
        aggregator, db = _setup()
        db.sizes["S1"].soft_delete()
        assert aggregator.size_view("S1") is None

    def test_size_without_rows_is_all_zero(self):
        aggregator, db = _setup()
        db.add_size("S9", [], variant_id="V2")
        view = aggregator.size_view("S9")
        assert (view.total_quantity, view.reserved_total, view.sellable_quantity) == (0, 0, 0)


class TestDeepReads:

    def test_product_deep_orders_variants_and_sizes(self):
        aggregator, _ = _setup()
        view = aggregator.product_deep("P1")
        assert [v.sku for v in view.variants] == ["TEE-BLUE", "TEE-RED"]
        red = view.variants[1]
        assert [s.label for s in red.sizes] == ["L", "M"]
        assert red.product.style_number == "ST-1"

    def test_deleted_nodes_are_excluded(self):
        aggregator, db = _setup()
        db.variants["V2"].soft_delete()
        db.sizes["S2"].soft_delete()
        view = aggregator.product_deep("P1")
        assert [v.sku for v in view.variants] == ["TEE-RED"]
        assert [s.id for s in view.variants[0].sizes] == ["S1"]

    def test_variant_by_sku(self):
        aggregator, _ = _setup()
        view = aggregator.variant_deep_by_sku("TEE-RED")
        assert view.id == "V1"
        assert len(view.sizes) == 2

    def test_variant_hidden_when_product_deleted(self):
        aggregator, db = _setup()
        db.products["P1"].archive()
        assert aggregator.variant_deep("V1") is None
        assert aggregator.product_deep("P1") is None

    def test_unknown_ids_return_none(self):
        aggregator, _ = _setup()
        assert aggregator.product_deep("nope") is None
        assert aggregator.variant_deep("nope") is None
        assert aggregator.variant_deep_by_sku("nope") is None


class TestListProducts:

    def test_lists_live_products_with_variant_counts(self):
        aggregator, db = _setup()
        db.add_product("P2", style_number="ST-0", title="Cap")
        db.variants["V2"].soft_delete()

        listing = aggregator.list_products()
        assert [p.style_number for p in listing] == ["ST-0", "ST-1"]
        assert listing[1].variant_count == 1

    def test_filter_by_status(self):
        aggregator, db = _setup()
        db.add_product("P2", style_number="ST-2")
        db.products["P2"].set_status(ProductStatus.INACTIVE)
        assert [p.id for p in aggregator.list_products(ProductStatus.INACTIVE)] == ["P2"]
