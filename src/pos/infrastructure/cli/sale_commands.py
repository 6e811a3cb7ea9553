"""CLI commands for recording sales."""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation

import click

from pos.application.dto import SaleItemSpec, SaleRequest, SaleResultDTO
from pos.infrastructure.bootstrap import process_sale_handler
from pos.infrastructure.cli.errors import user_errors
from pos.infrastructure.config import Settings


def _parse_items(raw: str) -> list[SaleItemSpec]:
    """Parse 'SKU1:3:350.00,SKU2:1:99.50' into SaleItemSpec list."""
    specs: list[SaleItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.split(":")
        if len(parts) != 3:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductID:Quantity:Price'."
            )
        product_id, qty, price = (p.strip() for p in parts)
        specs.append(SaleItemSpec(product_id=product_id, quantity=qty, price_at_sale=price))
    return specs


def _display_receipt(result: SaleResultDTO) -> None:
    receipt = result.receipt
    click.echo(receipt.store_name)
    click.echo(f"Sale ID: {receipt.sale_id}")
    click.echo(f"Date:    {receipt.timestamp}")
    click.echo()
    click.echo(f"  {'Item':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for line in receipt.items:
        click.echo(f"  {line.name:<20} {line.quantity:>5} {line.price:>10} {line.item_total:>10}")
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Total':<27} {receipt.total_amount:>20}")
    click.echo(f"  {'Received (' + receipt.payment_type + ')':<27} {receipt.amount_received:>20}")
    click.echo(f"  {'Change':<27} {receipt.change_given:>20}")


@click.command("record")
@click.option("--items", required=True, help="Items as 'ProductID:Qty:Price,...'.")
@click.option("--total", required=True, help="Sale total.")
@click.option("--received", required=True, help="Amount tendered by the customer.")
@click.option("--change", default=None, help="Change computed by the till (checked, not trusted).")
@click.option("--payment-type", default=None, help="Payment type (default: Cash).")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
@click.pass_obj
def sale_record(
    settings: Settings,
    items: str,
    total: str,
    received: str,
    change: str | None,
    payment_type: str | None,
    as_json: bool,
) -> None:
    """Validate, record and take stock for one sale."""
    request = SaleRequest(
        items=_parse_items(items),
        total_amount=total,
        amount_received=received,
        change_given=change if change is not None else _implied_change(total, received),
        payment_type=payment_type,
    )
    handler = process_sale_handler(settings)

    with user_errors():
        result = handler.handle(request)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(result.message)
    click.echo()
    _display_receipt(result)
    for warning in result.warnings:
        click.echo(f"WARNING: {warning}", err=True)


def _implied_change(total: str, received: str) -> str:
    # Without a till-computed value there is nothing to cross-check.
    try:
        return str(Decimal(received) - Decimal(total))
    except InvalidOperation:
        return "0"
