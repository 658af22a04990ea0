from __future__ import annotations

from pathlib import Path

import click
import structlog

from ims.infrastructure.bootstrap import build_container
from ims.infrastructure.cli.catalog_commands import (
    catalog_archive_product,
    catalog_archive_size,
    catalog_archive_variant,
    catalog_create,
    catalog_list,
    catalog_show,
    catalog_status,
    catalog_variant,
)
from ims.infrastructure.cli.order_commands import (
    order_create,
    order_delete,
    order_list,
    order_show,
    order_status,
)
from ims.infrastructure.cli.stock_commands import (
    stock_commit,
    stock_expect,
    stock_receive,
    stock_reconcile,
    stock_release,
    stock_reserve,
    stock_show,
)
from ims.infrastructure.config import Settings
from ims.infrastructure.logging_config import add_context, clear_context, configure_logging

logger = structlog.get_logger(__name__)


class SafeGroup(click.Group):
    """Turns unexpected failures into a generic message.

    Domain errors are already converted to ClickException by each
    command; anything else is logged with its traceback and reported
    without internal details.
    """

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except Exception:
            logger.exception("Unhandled error", command=ctx.invoked_subcommand)
            raise click.ClickException("Internal error")


@click.group(cls=SafeGroup)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding ims.json (overrides IMS_DATA_DIR).",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None) -> None:
    """IMS — Inventory reservation and fulfillment"""
    settings = Settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    configure_logging(settings.log_level, settings.log_json)
    clear_context()
    add_context(command=ctx.invoked_subcommand)
    ctx.obj = build_container(settings)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def catalog() -> None:
    """Manage products, variants and sizes."""


@cli.group()
def stock() -> None:
    """Move stock on a single size and location."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
catalog.add_command(catalog_archive_product)
catalog.add_command(catalog_archive_size)
catalog.add_command(catalog_archive_variant)
catalog.add_command(catalog_create)
catalog.add_command(catalog_list)
catalog.add_command(catalog_show)
catalog.add_command(catalog_status)
catalog.add_command(catalog_variant)
stock.add_command(stock_commit)
stock.add_command(stock_expect)
stock.add_command(stock_receive)
stock.add_command(stock_reconcile)
stock.add_command(stock_release)
stock.add_command(stock_reserve)
stock.add_command(stock_show)
