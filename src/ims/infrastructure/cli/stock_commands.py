"""CLI commands for direct stock movements and reconciliation."""

from __future__ import annotations

import click

from ims.application.adjust_stock import AdjustStockHandler, StockAction
from ims.application.reconcile_reservations import ReconcileReservationsHandler
from ims.application.show_catalog import ShowSizeHandler
from ims.domain.exceptions import DomainException
from ims.domain.model.inventory import InventoryRow
from ims.infrastructure.bootstrap import Container


def _movement(action: StockAction, help_text: str) -> click.Command:
    """Build the command for one stock movement."""

    @click.command(action.value, help=help_text)
    @click.option("--size", "size_id", required=True, help="Size ID.")
    @click.option("--location", default=None, help="Location (defaults to IMS_DEFAULT_LOCATION).")
    @click.option("--qty", required=True, type=int, help="Quantity.")
    @click.pass_obj
    def command(container: Container, size_id: str, location: str | None, qty: int) -> None:
        handler = AdjustStockHandler(ledger=container.ledger)
        location = location or container.settings.default_location

        try:
            row = handler.handle(action, size_id, location, qty)
        except DomainException as exc:
            raise click.ClickException(str(exc))

        _display_row(size_id, row)

    return command


def _display_row(size_id: str, row: InventoryRow) -> None:
    click.echo(
        f"{size_id} @ {row.location}: on hand {row.on_hand}, reserved {row.reserved}, "
        f"on order {row.on_order}, available {row.available}"
    )


stock_reserve = _movement(StockAction.RESERVE, "Hold stock if enough is sellable.")
stock_release = _movement(StockAction.RELEASE, "Release a hold (floors at zero).")
stock_commit = _movement(StockAction.COMMIT, "Ship reserved stock (on hand and reserved both drop).")
stock_receive = _movement(StockAction.RECEIVE, "Book goods in (draws down on order).")
stock_expect = _movement(StockAction.EXPECT, "Record stock inbound on a purchase order.")


@click.command("show")
@click.option("--size", "size_id", required=True, help="Size ID.")
@click.pass_obj
def stock_show(container: Container, size_id: str) -> None:
    """Show every location of a size with its totals."""
    handler = ShowSizeHandler(catalog=container.catalog, ledger=container.ledger)

    try:
        view = handler.handle(size_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Location':<16} {'On hand':>8} {'Reserved':>9} {'On order':>9} {'Available':>10}")
    click.echo("-" * 56)
    for row in view.inventory:
        click.echo(
            f"{row.location:<16} {row.on_hand:>8} {row.reserved:>9} {row.on_order:>9} {row.available:>10}"
        )
    click.echo("-" * 56)
    click.echo(
        f"{'Total':<16} {view.total_quantity:>8} {view.reserved_total:>9} "
        f"{view.on_order_total:>9} {view.sellable_quantity:>10}"
    )


@click.command("reconcile")
@click.option("--apply", is_flag=True, default=False, help="Release orphaned reservations.")
@click.pass_obj
def stock_reconcile(container: Container, apply: bool) -> None:
    """Compare reservations with open orders."""
    handler = ReconcileReservationsHandler(
        order_repo=container.orders,
        catalog=container.catalog,
        ledger=container.ledger,
    )

    try:
        drifts = handler.handle(apply=apply)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not drifts:
        click.echo("Reservations match open orders.")
        return

    click.echo(f"{'Size':<34} {'Location':<12} {'Expected':>9} {'Actual':>7} {'Released':>9}")
    click.echo("-" * 75)
    for d in drifts:
        click.echo(
            f"{d.size_id:<34} {d.location:<12} {d.expected:>9} {d.actual:>7} {d.released:>9}"
        )
