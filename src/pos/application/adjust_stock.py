"""Application service: manual stock adjustment (deliveries, write-offs, counts)."""

from __future__ import annotations

from pos.domain.repository.product_repository import ProductRepository


class AdjustStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, delta: int, allow_negative: bool = False) -> int:
        """Apply ``delta`` to a product's stock and return the new level."""
        return self._product_repo.adjust_stock(product_id, delta, allow_negative=allow_negative)
