"""Application service: Daily Sales Report use case (query)."""

from __future__ import annotations

from decimal import Decimal

from pos.application.dto import DailyReportDTO
from pos.domain.model.value_objects import Money
from pos.domain.repository.sale_ledger import SaleLedger


class DailyReportHandler:

    def __init__(self, sale_ledger: SaleLedger) -> None:
        self._sale_ledger = sale_ledger

    def handle(self, date_string: str) -> DailyReportDTO:
        """Total takings and transaction count for one ``YYYY-MM-DD`` day.

        A day with no sales is a zero report, not an error.
        """
        sales = self._sale_ledger.by_date(date_string)
        total = sum((sale.total_amount for sale in sales), Money(Decimal("0")))
        return DailyReportDTO(
            date=date_string,
            total_sales=total.amount,
            transaction_count=len(sales),
        )
