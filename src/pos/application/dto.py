"""Plain containers passed between the CLI and the application handlers.

Sale input arrives loosely typed, as the till sent it; validation happens in
the handler.  Receipt money fields are pre-formatted strings.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class SaleItemSpec:
    """Input: one cart line as submitted by the till (values not yet validated)."""

    product_id: Any
    quantity: Any
    price_at_sale: Any


@dataclass(frozen=True)
class SaleRequest:
    """Input: a complete sale submission."""

    items: list[SaleItemSpec]
    total_amount: Any
    amount_received: Any
    change_given: Any
    payment_type: str | None = None


@dataclass(frozen=True)
class ReceiptLineDTO:
    """Output: a single receipt line as displayed to the customer."""

    name: str
    quantity: int
    price: str  # formatted, e.g. "350.00"
    item_total: str


@dataclass(frozen=True)
class ReceiptDTO:
    store_name: str
    sale_id: str
    timestamp: str
    items: list[ReceiptLineDTO]
    total_amount: str
    amount_received: str
    change_given: str
    payment_type: str


@dataclass(frozen=True)
class SaleResultDTO:
    """Output: a completed sale.

    ``warnings`` lists stock decrements that failed after the sale was
    recorded; the sale stands and the stock needs manual reconciliation.
    """

    sale_id: str
    message: str
    receipt: ReceiptDTO
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "sale_id": self.sale_id,
            "message": self.message,
            "receipt": asdict(self.receipt),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class DailyReportDTO:
    date: str
    total_sales: Decimal
    transaction_count: int
