"""Product aggregate.

Products live independently of sales. They have their own lifecycle:
prices change, stock moves, products are added and removed from the catalog.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from pos.domain.exceptions import InsufficientStockError, ValidationError
from pos.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    ``id`` is case-sensitive and immutable once created.  ``stock`` is
    only changed through ``adjust_stock`` so that a general details update
    can never corrupt inventory counts.
    """

    id: str
    name: str
    price: Money
    category: str = ""
    stock: int = 0

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        product_id: Any,
        name: Any,
        price: Any,
        stock: Any,
        category: Any = "",
    ) -> Product:
        """Build a new product from loosely-typed input, enforcing all invariants."""
        product_id = _clean(product_id)
        name = _clean(name)
        if not product_id:
            raise ValidationError("Product ID is required")
        if not name:
            raise ValidationError("Product name is required")

        try:
            money = Money.of(price)
        except ValidationError as exc:
            raise ValidationError(
                f"Invalid price {price!r}: must be a non-negative number"
            ) from exc

        count = parse_stock(stock)
        if count is None or count < 0:
            raise ValidationError(
                f"Invalid stock {stock!r}: must be a non-negative whole number"
            )

        return Product(
            id=product_id,
            name=name,
            price=money,
            category=_clean(category),
            stock=count,
        )

    # --- Mutations ------------------------------------------------------------

    def update_details(self, name: Any, price: Any, category: Any = "") -> None:
        """Change name, price and category.  Stock is deliberately untouched."""
        new_name = _clean(name)
        if not new_name:
            raise ValidationError(f"Product name cannot be empty for ID '{self.id}'")
        try:
            new_price = Money.of(price)
        except ValidationError as exc:
            raise ValidationError(
                f"Invalid price {price!r} for ID '{self.id}': must be a non-negative number"
            ) from exc

        self.name = new_name
        self.price = new_price
        self.category = _clean(category)

    def adjust_stock(self, delta: int, allow_negative: bool = False) -> int:
        """Apply a stock delta and return the new level.

        Raises InsufficientStockError, leaving stock unchanged, when the
        result would go below zero and ``allow_negative`` is not set.
        """
        if not isinstance(delta, int) or isinstance(delta, bool):
            raise ValidationError(
                f"Stock change must be an integer, got {type(delta).__name__}"
            )
        new_stock = self.stock + delta
        if not allow_negative and new_stock < 0:
            raise InsufficientStockError(
                self.id, requested=-delta, available=self.stock, name=self.name
            )
        self.stock = new_stock
        return new_stock

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on ID or name."""
        needle = term.lower()
        return needle in self.id.lower() or needle in self.name.lower()


def parse_stock(value: Any) -> int | None:
    """Coerce a stored or submitted stock value to int; None when not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
            return parse_stock(number)
    return None


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
