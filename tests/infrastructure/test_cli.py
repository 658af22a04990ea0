"""End-to-end tests for the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from ims.application.adjust_stock import AdjustStockHandler
from ims.infrastructure.bootstrap import build_container
from ims.infrastructure.cli.main import cli
from ims.infrastructure.config import Settings

PRODUCT_BODY = {
    "product": {"styleNumber": "ST-100", "title": "Classic Tee", "price": 1000},
    "variants": [
        {
            "sku": "TEE-RED",
            "color": {"name": "Red", "code": "#f00"},
            "sizes": [
                {"label": "M", "barcode": "111", "inventory": [{"location": "WH-A", "onHand": 3}]},
            ],
        }
    ],
}


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch):
    monkeypatch.setenv("IMS_LOG_LEVEL", "ERROR")


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def invoke(*args: str, input: str | None = None):
        return runner.invoke(cli, ["--data-dir", str(tmp_path), *args], input=input)

    return invoke


@pytest.fixture
def size_id(run, tmp_path) -> str:
    result = run("catalog", "create", input=json.dumps(PRODUCT_BODY))
    assert result.exit_code == 0, result.output
    catalog = build_container(Settings(data_dir=tmp_path)).catalog
    variant = catalog.get_variant_by_sku("TEE-RED")
    return catalog.sizes_of(variant.id)[0].id


def _order_body(size_id: str, qty: int) -> str:
    return json.dumps({
        "customer": "Alice",
        "products": [{"product": {"_id": size_id, "name": "Tee M", "price": 1000}, "quantity": qty, "location": "WH-A"}],
    })


def _order_number(output: str) -> str:
    return output.split()[1]


class TestCatalogCommands:

    def test_create_and_show_variant(self, run, size_id):
        result = run("catalog", "variant", "--sku", "TEE-RED")
        assert result.exit_code == 0
        assert "Classic Tee" in result.output
        assert size_id in result.output

    def test_list_products(self, run, size_id):
        result = run("catalog", "list")
        assert "ST-100" in result.output

    def test_invalid_json_body(self, run):
        result = run("catalog", "create", input="{not json")
        assert result.exit_code != 0
        assert "not valid JSON" in result.output

    def test_archive_product_hides_it(self, run, size_id, tmp_path):
        product_id = build_container(Settings(data_dir=tmp_path)).catalog.list_products()[0].id
        result = run("catalog", "archive-product", "--id", product_id, "--actor", "ops")
        assert result.exit_code == 0
        assert "3 documents" in result.output
        assert "No products found." in run("catalog", "list").output


class TestOrderCommands:

    def test_create_reserves_stock(self, run, size_id):
        result = run("order", "create", input=_order_body(size_id, 2))
        assert result.exit_code == 0, result.output
        assert "In Hand" in result.output

        stock = run("stock", "show", "--size", size_id)
        assert "WH-A" in stock.output
        assert stock.output.splitlines()[-1].split() == ["Total", "3", "2", "0", "1"]

    def test_insufficient_stock_is_reported(self, run, size_id):
        result = run("order", "create", input=_order_body(size_id, 4))
        assert result.exit_code == 1
        assert f"Insufficient stock for size {size_id} at WH-A" in result.output
        assert "No orders found." in run("order", "list").output

    def test_deliver_then_redeliver(self, run, size_id):
        created = run("order", "create", input=_order_body(size_id, 2))
        number = _order_number(created.output)

        delivered = run("order", "status", "--number", number, "--status", "delivered")
        assert delivered.exit_code == 0
        assert "Delivered" in delivered.output

        again = run("order", "status", "--number", number, "--status", "Delivered")
        assert again.exit_code == 1
        assert "already Delivered" in again.output

        row = run("stock", "commit", "--size", size_id, "--location", "WH-A", "--qty", "0")
        assert row.exit_code == 1
        show = run("stock", "show", "--size", size_id)
        assert show.output.splitlines()[-1].split() == ["Total", "1", "0", "0", "1"]

    def test_delete_then_reconcile(self, run, size_id):
        number = _order_number(run("order", "create", input=_order_body(size_id, 2)).output)
        deleted = run("order", "delete", "--number", number, "--yes")
        assert deleted.exit_code == 0

        report = run("stock", "reconcile")
        assert size_id in report.output
        run("stock", "reconcile", "--apply")
        assert "Reservations match open orders." in run("stock", "reconcile").output

    def test_unknown_order(self, run):
        result = run("order", "show", "--number", "ORD-0")
        assert result.exit_code == 1
        assert "Order ORD-0 not found" in result.output


class TestStockCommands:

    def test_expect_and_receive(self, run, size_id):
        run("stock", "expect", "--size", size_id, "--location", "WH-B", "--qty", "4")
        result = run("stock", "receive", "--size", size_id, "--location", "WH-B", "--qty", "4")
        assert result.exit_code == 0
        assert result.output.strip() == (
            f"{size_id} @ WH-B: on hand 4, reserved 0, on order 0, available 4"
        )

    def test_reserve_refused(self, run, size_id):
        result = run("stock", "reserve", "--size", size_id, "--location", "WH-A", "--qty", "9")
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output


class TestUnexpectedErrors:

    def test_reported_as_internal_error_without_details(self, run, size_id, monkeypatch):
        # Keep the logged traceback out of the captured output.
        monkeypatch.setenv("IMS_LOG_LEVEL", "CRITICAL")

        def broken(self, action, size_id, location, qty):
            raise RuntimeError(f"ledger row {size_id} at {location}: on_hand=3 reserved=2")

        monkeypatch.setattr(AdjustStockHandler, "handle", broken)
        result = run("stock", "reserve", "--size", size_id, "--location", "WH-A", "--qty", "1")

        assert result.exit_code == 1
        assert "Internal error" in result.output
        assert "ledger row" not in result.output
        assert "on_hand" not in result.output
