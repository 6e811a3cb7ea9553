"""Application service: List / Search Products use case (query)."""

from __future__ import annotations

from pos.domain.model.product import Product
from pos.domain.repository.product_repository import ProductRepository


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, term: str | None = None) -> list[Product]:
        if term is None:
            return self._product_repo.get_all()
        return self._product_repo.search(term)
