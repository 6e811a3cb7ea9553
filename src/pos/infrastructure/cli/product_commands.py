"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from pos.application.add_product import AddProductHandler
from pos.application.adjust_stock import AdjustStockHandler
from pos.application.delete_product import DeleteProductHandler
from pos.application.list_products import ListProductsHandler
from pos.application.update_product import UpdateProductHandler
from pos.infrastructure.bootstrap import product_repository
from pos.infrastructure.cli.errors import user_errors
from pos.infrastructure.config import Settings


@click.command("add")
@click.option("--id", "product_id", required=True, help="Product ID (SKU), case-sensitive.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price (e.g. 350.00).")
@click.option("--stock", required=True, help="Opening stock level.")
@click.option("--category", default="", help="Optional category.")
@click.pass_obj
def product_add(settings: Settings, product_id: str, name: str, price: str, stock: str, category: str) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository(settings))

    with user_errors():
        product = handler.handle(product_id, name, price, stock, category)

    click.echo(f"Product '{product.name}' (ID: {product.id}) added at {product.price}")


@click.command("list")
@click.option("--search", "term", default=None, help="Filter by ID or name (case-insensitive).")
@click.pass_obj
def product_list(settings: Settings, term: str | None) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(product_repo=product_repository(settings))

    with user_errors():
        products = handler.handle(term)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<12} {'Name':<24} {'Category':<14} {'Price':>10} {'Stock':>7}")
    click.echo("-" * 71)
    for p in products:
        click.echo(f"{p.id:<12} {p.name:<24} {p.category:<14} {str(p.price):>10} {p.stock:>7}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", required=True, help="New name.")
@click.option("--price", required=True, help="New price (e.g. 29.99).")
@click.option("--category", default="", help="New category.")
@click.pass_obj
def product_update(settings: Settings, product_id: str, name: str, price: str, category: str) -> None:
    """Update a product's name, price and category (never its stock)."""
    handler = UpdateProductHandler(product_repo=product_repository(settings))

    with user_errors():
        product = handler.handle(product_id, name, price, category)

    click.echo(f"Product '{product.name}' (ID: {product.id}) updated.")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_delete(settings: Settings, product_id: str) -> None:
    """Remove a product from the catalog."""
    handler = DeleteProductHandler(product_repo=product_repository(settings))

    with user_errors():
        handler.handle(product_id)

    click.echo(f"Product ID '{product_id.strip()}' deleted.")


@click.command("adjust-stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--delta", required=True, type=int, help="Change in stock, e.g. 12 or -3.")
@click.option("--allow-negative", is_flag=True, default=False, help="Permit stock below zero.")
@click.pass_obj
def product_adjust_stock(settings: Settings, product_id: str, delta: int, allow_negative: bool) -> None:
    """Add to or take from a product's stock."""
    handler = AdjustStockHandler(product_repo=product_repository(settings))

    with user_errors():
        new_stock = handler.handle(product_id, delta, allow_negative=allow_negative)

    click.echo(f"Stock for '{product_id.strip()}' is now {new_stock}")
