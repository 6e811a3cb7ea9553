"""Sale aggregate: one completed, immutable transaction in the ledger.

Line items capture the price at the time of sale; later price changes on
the product never affect a recorded sale.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money, Quantity

DEFAULT_PAYMENT_TYPE = "Cash"

# Client-submitted change may differ from ours by float noise.
CHANGE_TOLERANCE = Decimal("0.001")


@dataclass(frozen=True, order=True)
class SaleId:
    """``YYYYMMDD-NNN``: calendar day plus a per-day sequence number.

    The sequence is zero-padded to at least three digits; past 999 it
    simply grows wider.
    """

    day: date
    sequence: int

    def __post_init__(self) -> None:
        if self.sequence <= 0:
            raise ValidationError("Sale sequence must be positive")

    def __str__(self) -> str:
        return f"{self.day:%Y%m%d}-{self.sequence:03d}"

    def next(self) -> SaleId:
        return SaleId(self.day, self.sequence + 1)

    @staticmethod
    def first(day: date) -> SaleId:
        return SaleId(day, 1)

    @staticmethod
    def parse(raw: object) -> SaleId | None:
        """Parse a stored ID; None for anything that is not ``YYYYMMDD-N+``."""
        if not isinstance(raw, str):
            return None
        prefix, sep, suffix = raw.partition("-")
        if not sep or len(prefix) != 8 or not _ascii_digits(prefix) or not _ascii_digits(suffix):
            return None
        try:
            day = datetime.strptime(prefix, "%Y%m%d").date()
        except ValueError:
            return None
        sequence = int(suffix)
        if sequence <= 0:
            return None
        return SaleId(day, sequence)


def day_prefix(raw: object) -> str | None:
    """The 8-character date prefix of a stored sale ID, if it looks like one."""
    if isinstance(raw, str) and len(raw) > 8 and _ascii_digits(raw[:8]):
        return raw[:8]
    return None


def _ascii_digits(text: str) -> bool:
    # str.isdigit() also accepts superscripts and other scripts' digits.
    return text.isascii() and text.isdigit()


@dataclass(frozen=True)
class SaleLineItem:
    """One product/quantity/price entry, fixed at sale time."""

    product_id: str
    quantity: Quantity
    price_at_sale: Money

    @property
    def line_total(self) -> Money:
        return (self.price_at_sale * self.quantity.value).rounded()


@dataclass(frozen=True)
class Sale:
    """Aggregate root for completed sales.

    Use ``Sale.create()`` for new sales; it computes change server-side
    and enforces the payment invariants.  The ``__init__`` stays simple so
    the ledger can reconstitute stored sales without re-validating.
    """

    sale_id: str
    timestamp: datetime
    items: tuple[SaleLineItem, ...]
    total_amount: Money
    amount_received: Money
    change_given: Money
    payment_type: str = DEFAULT_PAYMENT_TYPE

    # --- Factory (used for NEW sales only) ------------------------------------

    @staticmethod
    def create(
        sale_id: SaleId | str,
        timestamp: datetime,
        items: list[SaleLineItem],
        total_amount: Money,
        amount_received: Money,
        payment_type: str | None = None,
    ) -> Sale:
        """Create a new sale; ``change_given`` is always recomputed here."""
        if timestamp.tzinfo is None:
            raise ValidationError("Sale timestamp must carry a UTC offset")
        if not items:
            raise ValidationError("The sale cart is empty.")
        if amount_received < total_amount:
            raise ValidationError(
                f"Amount received {amount_received} is less than total {total_amount}"
            )
        return Sale(
            sale_id=str(sale_id),
            timestamp=timestamp,
            items=tuple(items),
            total_amount=total_amount,
            amount_received=amount_received,
            change_given=amount_received - total_amount,
            payment_type=(payment_type or "").strip() or DEFAULT_PAYMENT_TYPE,
        )
