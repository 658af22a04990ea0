"""CLI commands for the Order aggregate."""

from __future__ import annotations

import json
from typing import Any, TextIO

import click

from ims.application.create_order import CreateOrderHandler
from ims.application.delete_order import DeleteOrderHandler
from ims.application.dto import OrderDTO
from ims.application.requests import normalize_order_request, normalize_status
from ims.application.show_order import ListOrdersHandler, ShowOrderHandler
from ims.application.update_order_status import UpdateOrderStatusHandler
from ims.domain.exceptions import DomainException
from ims.infrastructure.bootstrap import Container


def read_json(source: TextIO) -> Any:
    """Parse a JSON request body from a file or stdin."""
    try:
        return json.load(source)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Request body is not valid JSON: {exc}")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer}")
    if dto.shipping_address:
        click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(
        f"  {'Item':<20} {'Size':<34} {'Location':<12} {'Qty':>5} {'Price':>8} {'Total':>8}  "
    )
    click.echo(f"  {'-'*95}")
    for line in dto.lines:
        shipped = "shipped" if line.committed else ""
        click.echo(
            f"  {line.name:<20} {line.size_id:<34} {line.location:<12} "
            f"{line.quantity:>5} {line.price:>8} {line.line_total:>8}  {shipped}"
        )
    click.echo(f"  {'-'*95}")
    click.echo(f"  {'Order Total':<75} {dto.total_amount:>8}")


@click.command("create")
@click.option(
    "--file", "source", type=click.File("r"), default="-",
    help="JSON request body (defaults to stdin).",
)
@click.pass_obj
def order_create(container: Container, source: TextIO) -> None:
    """Create an order, reserving stock for every line."""
    handler = CreateOrderHandler(
        order_repo=container.orders,
        ledger=container.ledger,
    )

    try:
        command = normalize_order_request(
            read_json(source), container.settings.default_location
        )
        dto = handler.handle(command)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("status")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--status", required=True, help="In Hand, Processing or Delivered.")
@click.pass_obj
def order_status(container: Container, order_number: str, status: str) -> None:
    """Change an order's status (Delivered ships its stock)."""
    handler = UpdateOrderStatusHandler(
        order_repo=container.orders,
        ledger=container.ledger,
    )

    try:
        dto = handler.handle(order_number, normalize_status(status))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("show")
@click.option("--number", "order_number", required=True, help="Order number to display.")
@click.pass_obj
def order_show(container: Container, order_number: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=container.orders)

    try:
        dto = handler.handle(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.pass_obj
def order_list(container: Container) -> None:
    """List all orders, newest first."""
    orders = ListOrdersHandler(order_repo=container.orders).handle()

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Number':<24} {'Customer':<20} {'Status':<12} {'Total':>10}")
    click.echo("-" * 69)
    for dto in orders:
        click.echo(
            f"{dto.order_number:<24} {dto.customer:<20} {dto.status:<12} {dto.total_amount:>10}"
        )


@click.command("delete")
@click.option("--number", "order_number", required=True, help="Order number to delete.")
@click.confirmation_option(prompt="Delete the order without releasing its stock?")
@click.pass_obj
def order_delete(container: Container, order_number: str) -> None:
    """Delete an order (admin override; reservations are NOT released)."""
    handler = DeleteOrderHandler(order_repo=container.orders)

    try:
        handler.handle(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_number} deleted.")
