"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_all(self) -> list[Product]:
        """Return every product in the catalog, in stored order."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its trimmed, case-sensitive ID, or None."""

    @abstractmethod
    def is_id_unique(self, product_id: str) -> bool:
        """True if no product currently uses this ID."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Append a new product; ConflictError if the ID is taken."""

    @abstractmethod
    def update(self, product_id: str, name: str, price: object, category: str = "") -> Product:
        """Change name, price and category of an existing product."""

    @abstractmethod
    def adjust_stock(self, product_id: str, delta: int, allow_negative: bool = False) -> int:
        """Apply a stock delta and return the new level."""

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product; EntityNotFoundError if absent."""

    @abstractmethod
    def search(self, term: str) -> list[Product]:
        """Case-insensitive substring match on ID and name; all for an empty term."""
