"""CLI commands for the catalog (products, variants, sizes)."""

from __future__ import annotations

from typing import TextIO

import click

from ims.application.archive_catalog import (
    ArchiveProductHandler,
    ArchiveSizeHandler,
    ArchiveVariantHandler,
    SetProductStatusHandler,
)
from ims.application.create_product import CreateProductHandler
from ims.application.requests import normalize_product_request
from ims.application.show_catalog import (
    ListProductsHandler,
    ShowProductHandler,
    ShowVariantHandler,
)
from ims.domain.exceptions import DomainException
from ims.domain.service.catalog_aggregator import ProductView, VariantView
from ims.infrastructure.bootstrap import Container
from ims.infrastructure.cli.order_commands import read_json


def _display_sizes(variant: VariantView) -> None:
    click.echo(f"  Variant {variant.sku}  ({variant.color.name})  id={variant.id}")
    if not variant.sizes:
        click.echo("    (no sizes)")
        return
    click.echo(
        f"    {'Size':<8} {'ID':<34} {'Barcode':<16} {'Total':>7} {'Reserved':>9} {'Sellable':>9} {'On order':>9}"
    )
    for size in variant.sizes:
        click.echo(
            f"    {size.label:<8} {size.id:<34} {size.barcode:<16} {size.total_quantity:>7} "
            f"{size.reserved_total:>9} {size.sellable_quantity:>9} {size.on_order_total:>9}"
        )


def _display_product(view: ProductView) -> None:
    click.echo(f"Product {view.style_number} '{view.title}'  (status={view.status})")
    click.echo(f"ID:    {view.id}")
    click.echo(f"Price: {view.price}")
    click.echo()
    for variant in view.variants:
        _display_sizes(variant)


@click.command("create")
@click.option(
    "--file", "source", type=click.File("r"), default="-",
    help="JSON body with product, variants, sizes and inventory (defaults to stdin).",
)
@click.option("--actor", default=None, help="Who is making the change.")
@click.pass_obj
def catalog_create(container: Container, source: TextIO, actor: str | None) -> None:
    """Create a product with its variants, sizes and opening stock."""
    handler = CreateProductHandler(
        catalog=container.catalog,
        ledger=container.ledger,
        masters=container.masters,
    )

    try:
        view = handler.handle(normalize_product_request(read_json(source)), actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(view)


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def catalog_show(container: Container, product_id: str) -> None:
    """Show a product with per-size stock totals."""
    handler = ShowProductHandler(catalog=container.catalog, ledger=container.ledger)

    try:
        view = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(view)


@click.command("variant")
@click.option("--id", "variant_id", default=None, help="Variant ID.")
@click.option("--sku", default=None, help="Variant SKU.")
@click.pass_obj
def catalog_variant(container: Container, variant_id: str | None, sku: str | None) -> None:
    """Show one variant (by ID or SKU) with per-size stock totals."""
    handler = ShowVariantHandler(catalog=container.catalog, ledger=container.ledger)

    try:
        view = handler.handle(variant_id=variant_id, sku=sku)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {view.product.style_number} '{view.product.title}'")
    _display_sizes(view)


@click.command("list")
@click.option("--status", default=None, help="Only products in this status.")
@click.pass_obj
def catalog_list(container: Container, status: str | None) -> None:
    """List live products."""
    handler = ListProductsHandler(catalog=container.catalog, ledger=container.ledger)

    try:
        rows = handler.handle(status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<34} {'Style':<12} {'Title':<24} {'Status':<10} {'Variants':>8}")
    click.echo("-" * 92)
    for p in rows:
        click.echo(
            f"{p.id:<34} {p.style_number:<12} {p.title:<24} {p.status:<10} {p.variant_count:>8}"
        )


@click.command("status")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--status", required=True, help="active, inactive, draft or archived.")
@click.option("--actor", default=None, help="Who is making the change.")
@click.pass_obj
def catalog_status(container: Container, product_id: str, status: str, actor: str | None) -> None:
    """Set a product's lifecycle status (archived cascades)."""
    handler = SetProductStatusHandler(
        catalog=container.catalog,
        archive=container.archive,
        ledger=container.ledger,
    )

    try:
        target = handler.handle(product_id, status, actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} is now {target.value}.")


@click.command("archive-product")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--actor", default=None, help="Who is deleting.")
@click.pass_obj
def catalog_archive_product(container: Container, product_id: str, actor: str | None) -> None:
    """Archive a product together with its variants and sizes."""
    handler = ArchiveProductHandler(
        catalog=container.catalog,
        archive=container.archive,
        ledger=container.ledger,
    )

    try:
        count = handler.handle(product_id, actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} archived ({count} documents).")


@click.command("archive-variant")
@click.option("--id", "variant_id", required=True, help="Variant ID.")
@click.option("--actor", default=None, help="Who is deleting.")
@click.pass_obj
def catalog_archive_variant(container: Container, variant_id: str, actor: str | None) -> None:
    """Archive a variant together with its sizes."""
    handler = ArchiveVariantHandler(
        catalog=container.catalog,
        archive=container.archive,
        ledger=container.ledger,
    )

    try:
        count = handler.handle(variant_id, actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Variant {variant_id} archived ({count} documents).")


@click.command("archive-size")
@click.option("--id", "size_id", required=True, help="Size ID.")
@click.option("--actor", default=None, help="Who is deleting.")
@click.pass_obj
def catalog_archive_size(container: Container, size_id: str, actor: str | None) -> None:
    """Archive a single size (its stock counts are kept as they are)."""
    handler = ArchiveSizeHandler(
        catalog=container.catalog,
        archive=container.archive,
        ledger=container.ledger,
    )

    try:
        handler.handle(size_id, actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Size {size_id} archived.")
