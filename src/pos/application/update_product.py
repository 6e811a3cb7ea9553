"""Application service: Update Product use case."""

from __future__ import annotations

from typing import Any

from pos.domain.model.product import Product
from pos.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, name: Any, price: Any, category: Any = "") -> Product:
        """Update a product's name, price and category.

        This does NOT affect any recorded sales; they captured a
        price snapshot at sale time.  Stock is never changed here.
        """
        return self._product_repo.update(product_id, name, price, category)
