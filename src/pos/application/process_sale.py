"""Application service: Process Sale use case (the sale orchestrator).

Sequences the product catalog and the sale ledger for one till submission:

1. Validate every cart line against current stock.  All failing lines are
   reported together; nothing is written.
2. Generate a sale ID.
3. Record the sale with server-computed change.
4. Decrement stock line by line.  A failure here does NOT undo the sale:
   once money and goods have changed hands the ledger entry stands, and
   the failed lines are returned as reconciliation warnings.

There is no transaction spanning both collections.  A crash between steps
3 and 4 leaves a recorded sale whose stock was never taken off.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal, InvalidOperation

from pos.application.dto import (
    ReceiptDTO,
    ReceiptLineDTO,
    SaleItemSpec,
    SaleRequest,
    SaleResultDTO,
)
from pos.domain.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    InsufficientStockError,
    SaleRejectedError,
    ServerFaultError,
    StorageError,
    ValidationError,
)
from pos.domain.model.product import Product, parse_stock
from pos.domain.model.sale import CHANGE_TOLERANCE, Sale, SaleLineItem
from pos.domain.model.value_objects import Money, Quantity
from pos.domain.repository.product_repository import ProductRepository
from pos.domain.repository.sale_ledger import SaleLedger

logger = logging.getLogger(__name__)

DEFAULT_STORE_NAME = "My Simple Grocery"

# A concurrent sale can take the ID we generated; regenerate this many times.
MAX_ID_ATTEMPTS = 3


class ProcessSaleHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        sale_ledger: SaleLedger,
        clock: Callable[[], datetime],
        store_name: str = DEFAULT_STORE_NAME,
    ) -> None:
        self._product_repo = product_repo
        self._sale_ledger = sale_ledger
        self._clock = clock
        self._store_name = store_name

    def handle(self, request: SaleRequest) -> SaleResultDTO:
        total, received = self._check_payment(request)
        lines = self._validate_items(request.items)

        sale = self._record(
            items=[line for line, _ in lines],
            total=total,
            received=received,
            payment_type=request.payment_type,
        )
        failed = self._decrement_stock(sale)

        message = f"Sale (ID: {sale.sale_id}) completed successfully."
        if failed:
            message += (
                f" NOTE: Issue updating stock for product IDs: {', '.join(failed)}."
                " Please verify levels manually."
            )
        logger.info("Sale %s completed (%d items, total %s)", sale.sale_id, len(sale.items), sale.total_amount)

        return SaleResultDTO(
            sale_id=sale.sale_id,
            message=message,
            receipt=self._to_receipt(sale, [product for _, product in lines]),
            warnings=[
                f"Stock for product '{product_id}' was not reduced; verify levels manually."
                for product_id in failed
            ],
        )

    # --- Step 1: validation ---------------------------------------------------

    @staticmethod
    def _check_payment(request: SaleRequest) -> tuple[Money, Money]:
        try:
            total = Money.of(request.total_amount)
            received = Money.of(request.amount_received)
            client_change = _decimal(request.change_given)
        except ValidationError as exc:
            logger.info("Rejected sale: invalid payment amounts (%s)", exc)
            raise ValidationError("Invalid payment amounts received.") from exc

        if received < total:
            logger.info("Rejected sale: received %s is less than total %s", received, total)
            raise ValidationError(
                f"Amount received ({received}) is less than the total ({total})."
            )

        server_change = received.amount - total.amount
        if abs(server_change - client_change) > CHANGE_TOLERANCE:
            logger.warning(
                "Change discrepancy. Client: %s, Server: %s; using server value",
                client_change,
                server_change,
            )
        return total, received

    def _validate_items(self, specs: list[SaleItemSpec]) -> list[tuple[SaleLineItem, Product]]:
        problems: list[DomainException] = []
        lines: list[tuple[SaleLineItem, Product]] = []
        requested: dict[str, int] = {}

        if not specs:
            problems.append(ValidationError("The sale cart is empty."))

        for number, spec in enumerate(specs or [], start=1):
            line = _parse_line(spec)
            if line is None:
                problems.append(
                    ValidationError(f"Item #{number} has invalid data (ID, quantity, price).")
                )
                continue

            product = self._fetch(line.product_id)
            if product is None:
                problems.append(
                    EntityNotFoundError(f"Product ID '{line.product_id}' not found in inventory.")
                )
                continue

            # Repeated lines for one product draw on the same stock.
            wanted = requested.get(line.product_id, 0) + line.quantity.value
            requested[line.product_id] = wanted
            if product.stock < wanted:
                problems.append(
                    InsufficientStockError(
                        line.product_id, requested=wanted, available=product.stock, name=product.name
                    )
                )
                continue

            lines.append((line, product))

        if problems:
            error = SaleRejectedError(problems)
            logger.info("Sale validation failed - %s", error)
            raise error
        return lines

    def _fetch(self, product_id: str) -> Product | None:
        try:
            return self._product_repo.get_by_id(product_id)
        except StorageError as exc:
            logger.error("Could not read product '%s' during sale validation: %s", product_id, exc)
            raise ServerFaultError("Product data is unavailable. Cannot process sale.") from exc

    # --- Steps 2 and 3: ID and record -----------------------------------------

    def _record(
        self,
        items: list[SaleLineItem],
        total: Money,
        received: Money,
        payment_type: str | None,
    ) -> Sale:
        for _ in range(MAX_ID_ATTEMPTS):
            try:
                sale_id = self._sale_ledger.generate_sale_id()
            except StorageError as exc:
                logger.error("Critical - failed to generate sale ID: %s", exc)
                raise ServerFaultError(
                    "Failed to generate unique Sale ID. Cannot process sale."
                ) from exc

            sale = Sale.create(
                sale_id=sale_id,
                timestamp=self._clock(),
                items=items,
                total_amount=total,
                amount_received=received,
                payment_type=payment_type,
            )
            try:
                self._sale_ledger.append(sale)
            except ConflictError:
                logger.warning("Sale ID %s was taken by a concurrent sale; regenerating", sale_id)
                continue
            except StorageError as exc:
                logger.error("Critical - failed to record sale %s: %s", sale_id, exc)
                raise ServerFaultError(
                    "Failed to save sale record after validation. Cannot complete sale."
                ) from exc
            return sale

        logger.error("Gave up after %d sale ID collisions", MAX_ID_ATTEMPTS)
        raise ServerFaultError("Failed to generate unique Sale ID. Cannot process sale.")

    # --- Step 4: stock --------------------------------------------------------

    def _decrement_stock(self, sale: Sale) -> list[str]:
        failed: list[str] = []
        for item in sale.items:
            try:
                self._product_repo.adjust_stock(
                    item.product_id, -item.quantity.value, allow_negative=False
                )
            except (DomainException, StorageError) as exc:
                logger.warning(
                    "Stock update failed for Product ID '%s' (change %d) for Sale ID '%s': %s. "
                    "Manual stock verification needed.",
                    item.product_id,
                    -item.quantity.value,
                    sale.sale_id,
                    exc,
                )
                failed.append(item.product_id)
        return failed

    # --- Mapping --------------------------------------------------------------

    def _to_receipt(self, sale: Sale, products: list[Product]) -> ReceiptDTO:
        return ReceiptDTO(
            store_name=self._store_name,
            sale_id=sale.sale_id,
            timestamp=sale.timestamp.isoformat(timespec="seconds"),
            items=[
                ReceiptLineDTO(
                    name=product.name or "Unknown Product",
                    quantity=item.quantity.value,
                    price=str(item.price_at_sale),
                    item_total=str(item.line_total),
                )
                for item, product in zip(sale.items, products)
            ],
            total_amount=str(sale.total_amount),
            amount_received=str(sale.amount_received),
            change_given=str(sale.change_given),
            payment_type=sale.payment_type,
        )


def _parse_line(spec: SaleItemSpec) -> SaleLineItem | None:
    product_id = str(spec.product_id or "").strip()
    quantity = _whole_number(spec.quantity)
    if not product_id or quantity is None or quantity <= 0:
        return None
    try:
        price = Money.of(spec.price_at_sale)
    except ValidationError:
        return None
    return SaleLineItem(product_id=product_id, quantity=Quantity(quantity), price_at_sale=price)


def _whole_number(value: object) -> int | None:
    """``3``, ``3.0`` and ``"3"`` are fine; ``2.5`` is not truncated to 2."""
    count = parse_stock(value)
    if count is None:
        return None
    try:
        exact = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return count if exact == count else None


def _decimal(value: object) -> Decimal:
    """Parse a possibly-negative client amount."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid amount: {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid amount: {value!r}") from exc
    if not number.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    return number
