"""Application service: Add Product use case."""

from __future__ import annotations

from typing import Any

from pos.domain.model.product import Product
from pos.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: Any, name: Any, price: Any, stock: Any, category: Any = "") -> Product:
        """Add a new product to the catalog.

        Field validation happens in ``Product.create``; the ID uniqueness
        check happens in the repository under the same lock as the write.
        """
        product = Product.create(product_id, name, price, stock, category)
        self._product_repo.add(product)
        return product
