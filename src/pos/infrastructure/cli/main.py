from pathlib import Path

import click
from pydantic import ValidationError

from pos.infrastructure.cli.product_commands import (
    product_add,
    product_adjust_stock,
    product_delete,
    product_list,
    product_update,
)
from pos.infrastructure.cli.report_commands import report_daily
from pos.infrastructure.cli.sale_commands import sale_record
from pos.infrastructure.config import Settings
from pos.infrastructure.logging import setup_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding products.json and sales.json (env: POS_DATA_DIR).",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None) -> None:
    """Point-of-sale backend: products, sales and daily reports."""
    overrides = {"data_dir": data_dir} if data_dir is not None else {}
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    setup_logging(settings)
    ctx.obj = settings


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def sale() -> None:
    """Record sales."""


@cli.group()
def report() -> None:
    """Sales reports."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_adjust_stock)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_update)
sale.add_command(sale_record)
report.add_command(report_daily)
