"""CLI commands for sales reports."""

from __future__ import annotations

import click

from pos.application.daily_report import DailyReportHandler
from pos.infrastructure.bootstrap import clock, sale_ledger
from pos.infrastructure.cli.errors import user_errors
from pos.infrastructure.config import Settings


@click.command("daily")
@click.option("--date", "date_string", default=None, help="Day as YYYY-MM-DD (default: today).")
@click.pass_obj
def report_daily(settings: Settings, date_string: str | None) -> None:
    """Show total sales and transaction count for one day."""
    if date_string is None:
        date_string = clock(settings)().date().isoformat()
    handler = DailyReportHandler(sale_ledger=sale_ledger(settings))

    with user_errors():
        report = handler.handle(date_string)

    click.echo(f"Daily report for {report.date}")
    click.echo(f"  Transactions: {report.transaction_count}")
    click.echo(f"  Total sales:  {report.total_sales:.2f}")
