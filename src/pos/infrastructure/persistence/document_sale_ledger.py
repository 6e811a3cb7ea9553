"""SaleLedger implementation on top of a DocumentStore.

The ledger is append-only: ``append`` adds one record under the exclusive
lock and never rewrites or removes existing ones.  Sale IDs are derived by
scanning prior records, not from a stored counter.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from decimal import Decimal

from pos.domain.exceptions import ConflictError, ValidationError
from pos.domain.model.sale import DEFAULT_PAYMENT_TYPE, Sale, SaleId, SaleLineItem, day_prefix
from pos.domain.model.value_objects import Money, Quantity
from pos.domain.repository.document_store import DocumentStore, Record, iter_matching
from pos.domain.repository.sale_ledger import SaleLedger
from pos.infrastructure.clock import Clock

logger = logging.getLogger(__name__)

SALES = "sales"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DocumentSaleLedger(SaleLedger):

    def __init__(self, store: DocumentStore, clock: Clock, collection: str = SALES) -> None:
        self._store = store
        self._clock = clock
        self._collection = collection

    # --- SaleLedger interface -------------------------------------------------

    def generate_sale_id(self) -> SaleId:
        """Next ``YYYYMMDD-NNN`` for today in the clock's timezone.

        Every record is considered, not just the trailing run for today: the
        whole document is in memory anyway, and a hand-edited or clock-skewed
        file need not be in time order.
        """
        day = self._clock().date()
        today = f"{day:%Y%m%d}"
        records = self._store.load(self._collection)

        latest: SaleId | None = None
        future = 0
        for raw in records:
            sale_id = raw.get("sale_id") if isinstance(raw, dict) else None
            prefix = day_prefix(sale_id)
            if prefix is None:
                continue
            if prefix > today:
                future += 1
            elif prefix == today:
                parsed = SaleId.parse(sale_id)
                if parsed is not None and (latest is None or parsed > latest):
                    latest = parsed

        if future:
            logger.warning("Sales ledger holds %d sale(s) dated after %s; check the clock", future, today)
        return latest.next() if latest is not None else SaleId.first(day)

    def append(self, sale: Sale) -> None:
        self._validate(sale)
        raw = self._to_raw(sale)
        with self._store.transaction(self._collection) as records:
            if any(True for _ in iter_matching(records, "sale_id", sale.sale_id)):
                logger.warning("Sale ID '%s' already recorded", sale.sale_id)
                raise ConflictError(f"Sale ID '{sale.sale_id}' already recorded")
            records.append(raw)
        logger.info("Recorded sale %s (total %s)", sale.sale_id, sale.total_amount)

    def by_date(self, date_string: str) -> list[Sale]:
        if not isinstance(date_string, str) or not _DATE_RE.match(date_string):
            logger.info("Invalid date format %r", date_string)
            raise ValidationError(
                f"Invalid date format '{date_string}'. Expected 'YYYY-MM-DD'."
            )

        sales: list[Sale] = []
        for raw in self._store.load(self._collection):
            if not isinstance(raw, dict):
                continue
            timestamp = raw.get("timestamp")
            if not isinstance(timestamp, str) or timestamp[:10] != date_string:
                continue
            sale = self._to_domain(raw)
            if sale is not None:
                sales.append(sale)
        return sales

    # --- Validation -----------------------------------------------------------

    @staticmethod
    def _validate(sale: Sale) -> None:
        missing = []
        if not sale.sale_id or not sale.sale_id.strip():
            missing.append("sale_id")
        if sale.timestamp is None:
            missing.append("timestamp")
        if not sale.items:
            missing.append("items")
        if sale.total_amount is None:
            missing.append("total_amount")
        if missing:
            raise ValidationError(f"Sale record is missing required fields: {', '.join(missing)}")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(sale: Sale) -> Record:
        return {
            "sale_id": sale.sale_id,
            "timestamp": sale.timestamp.isoformat(timespec="seconds"),
            "items": [
                {
                    "product_id": item.product_id,
                    "quantity": item.quantity.value,
                    "price_at_sale": str(item.price_at_sale.amount),
                }
                for item in sale.items
            ],
            "total_amount": str(sale.total_amount.amount),
            "amount_received": str(sale.amount_received.amount),
            "change_given": str(sale.change_given.amount),
            "payment_type": sale.payment_type,
        }

    @staticmethod
    def _to_domain(raw: Record) -> Sale | None:
        """Rebuild a stored sale; hand-edited damage is logged, not fatal."""
        sale_id = str(raw.get("sale_id", ""))
        try:
            timestamp = datetime.fromisoformat(raw["timestamp"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping sale record %r: unreadable timestamp", sale_id)
            return None

        items: list[SaleLineItem] = []
        raw_items = raw.get("items")
        for entry in raw_items if isinstance(raw_items, list) else []:
            try:
                items.append(
                    SaleLineItem(
                        product_id=str(entry["product_id"]),
                        quantity=Quantity(int(entry["quantity"])),
                        price_at_sale=Money.of(entry["price_at_sale"]),
                    )
                )
            except (KeyError, TypeError, ValueError, ValidationError):
                logger.warning("Sale record %r has a malformed line item: %r", sale_id, entry)

        return Sale(
            sale_id=sale_id,
            timestamp=timestamp,
            items=tuple(items),
            total_amount=_stored_money(raw, "total_amount", sale_id),
            amount_received=_stored_money(raw, "amount_received", sale_id),
            change_given=_stored_money(raw, "change_given", sale_id),
            payment_type=str(raw.get("payment_type") or DEFAULT_PAYMENT_TYPE),
        )


def _stored_money(raw: Record, key: str, sale_id: str) -> Money:
    try:
        return Money.of(raw[key])
    except (KeyError, ValidationError):
        logger.warning("Sale record %r has missing or invalid '%s'; using 0", sale_id, key)
        return Money(Decimal("0"))
