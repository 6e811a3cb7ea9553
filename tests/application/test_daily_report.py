"""Tests for the DailyReport query."""

from decimal import Decimal

import pytest

from pos.application.daily_report import DailyReportHandler
from pos.domain.exceptions import ValidationError
from pos.infrastructure.persistence.document_sale_ledger import SALES, DocumentSaleLedger
from tests.fakes import FakeClock, FakeDocumentStore


def _sale(sale_id, timestamp, total):
    return {
        "sale_id": sale_id,
        "timestamp": timestamp,
        "items": [{"product_id": "SKU1", "quantity": 1, "price_at_sale": total}],
        "total_amount": total,
        "amount_received": total,
        "change_given": "0",
        "payment_type": "Cash",
    }


def _handler(records):
    store = FakeDocumentStore({SALES: records})
    return DailyReportHandler(DocumentSaleLedger(store, FakeClock()))


class TestDailyReport:

    def test_day_without_sales_is_a_zero_report(self):
        report = _handler([]).handle("2025-04-07")
        assert report.total_sales == Decimal("0")
        assert report.transaction_count == 0

    def test_sums_only_the_requested_day(self):
        handler = _handler([
            _sale("20250406-001", "2025-04-06T18:00:00+05:30", "999.99"),
            _sale("20250407-001", "2025-04-07T09:12:00+05:30", "1050"),
            _sale("20250407-002", "2025-04-07T11:40:00+05:30", "120.50"),
            _sale("20250408-001", "2025-04-08T08:00:00+05:30", "15"),
        ])

        report = handler.handle("2025-04-07")

        assert report.date == "2025-04-07"
        assert report.transaction_count == 2
        assert report.total_sales == Decimal("1170.50")

    def test_exact_decimal_totals(self):
        handler = _handler([
            _sale(f"20250407-00{n}", "2025-04-07T10:00:00+05:30", "0.10") for n in range(1, 4)
        ])
        assert handler.handle("2025-04-07").total_sales == Decimal("0.30")

    def test_legacy_numeric_totals(self):
        handler = _handler([
            _sale("20250407-001", "2025-04-07T10:00:00+05:30", 1050.0),
            _sale("20250407-002", "2025-04-07T10:05:00+05:30", 120),
        ])
        assert handler.handle("2025-04-07").total_sales == Decimal("1170")

    def test_unreadable_total_counts_as_zero(self):
        broken = _sale("20250407-002", "2025-04-07T10:05:00+05:30", "120")
        broken["total_amount"] = "n/a"
        handler = _handler([_sale("20250407-001", "2025-04-07T10:00:00+05:30", "50"), broken])

        report = handler.handle("2025-04-07")

        assert report.transaction_count == 2
        assert report.total_sales == Decimal("50")

    def test_invalid_date(self):
        with pytest.raises(ValidationError, match="Invalid date format '7/4/2025'"):
            _handler([]).handle("7/4/2025")
