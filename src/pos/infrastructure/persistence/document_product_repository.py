"""ProductRepository implementation on top of a DocumentStore.

Every call re-reads the ``products`` collection; nothing is cached between
requests.  Mutations run inside ``DocumentStore.transaction`` so the
uniqueness check on add and the stock check on adjust are made under the
same exclusive lock as the write that depends on them.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal

from pos.domain.exceptions import ConflictError, EntityNotFoundError, ValidationError
from pos.domain.model.product import Product, parse_stock
from pos.domain.model.value_objects import Money
from pos.domain.repository.document_store import DocumentStore, Record, iter_matching
from pos.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)

PRODUCTS = "products"


class DocumentProductRepository(ProductRepository):

    def __init__(self, store: DocumentStore, collection: str = PRODUCTS) -> None:
        self._store = store
        self._collection = collection

    # --- Queries --------------------------------------------------------------

    def get_all(self) -> list[Product]:
        return [
            self._to_domain(raw)
            for raw in self._store.load(self._collection)
            if isinstance(raw, dict)
        ]

    def get_by_id(self, product_id: str) -> Product | None:
        product_id = (product_id or "").strip()
        if not product_id:
            return None
        records = self._store.load(self._collection)
        for _, raw in iter_matching(records, "id", product_id):
            return self._to_domain(raw)
        return None

    def is_id_unique(self, product_id: str) -> bool:
        return self.get_by_id(product_id) is None

    def search(self, term: str) -> list[Product]:
        products = self.get_all()
        term = (term or "").strip()
        if not term:
            return products
        return [p for p in products if p.matches(term)]

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product) -> None:
        product_id = product.id.strip()
        if not product_id or not product.name.strip():
            raise ValidationError("Product ID and name are required")
        if product.stock < 0:
            raise ValidationError(f"Invalid stock {product.stock}: must be non-negative")
        product = replace(product, id=product_id, name=product.name.strip())

        with self._store.transaction(self._collection) as records:
            if any(True for _ in iter_matching(records, "id", product_id)):
                logger.info("Rejected add: product ID '%s' already exists", product_id)
                raise ConflictError(f"Product ID '{product_id}' already exists.")
            records.append(self._to_raw(product))
        logger.info("Added product '%s' (%s)", product_id, product.name)

    def update(self, product_id: str, name: str, price: object, category: str = "") -> Product:
        product_id = self._require_id(product_id)
        with self._store.transaction(self._collection) as records:
            raw = self._find(records, product_id)
            product = self._to_domain(raw)
            product.update_details(name, price, category)
            raw["name"] = product.name
            raw["price"] = str(product.price.amount)
            raw["category"] = product.category
        logger.info("Updated product '%s'", product_id)
        return product

    def adjust_stock(self, product_id: str, delta: int, allow_negative: bool = False) -> int:
        product_id = self._require_id(product_id)
        with self._store.transaction(self._collection) as records:
            raw = self._find(records, product_id)
            product = self._to_domain(raw)
            previous = product.stock
            try:
                new_stock = product.adjust_stock(delta, allow_negative=allow_negative)
            except ValidationError:
                logger.warning(
                    "Insufficient stock for '%s': current %d, change %d",
                    product_id,
                    previous,
                    delta,
                )
                raise
            raw["stock"] = new_stock
        logger.debug("Stock for '%s': %d -> %d", product_id, previous, new_stock)
        return new_stock

    def delete(self, product_id: str) -> None:
        product_id = self._require_id(product_id)
        with self._store.transaction(self._collection) as records:
            index = self._index_of(records, product_id)
            del records[index]
        logger.info("Deleted product '%s'", product_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> Record:
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.price.amount),
            "category": product.category,
            "stock": product.stock,
        }

    @staticmethod
    def _to_domain(raw: Record) -> Product:
        return Product(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            price=_stored_money(raw.get("price")),
            category=str(raw.get("category") or ""),
            stock=parse_stock(raw.get("stock")) or 0,
        )

    # --- Lookup helpers -------------------------------------------------------

    @staticmethod
    def _require_id(product_id: str) -> str:
        product_id = (product_id or "").strip()
        if not product_id:
            raise ValidationError("Product ID cannot be empty")
        return product_id

    def _index_of(self, records: list[Record], product_id: str) -> int:
        for index, _ in iter_matching(records, "id", product_id):
            return index
        logger.info("Product with ID '%s' not found", product_id)
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    def _find(self, records: list[Record], product_id: str) -> Record:
        return records[self._index_of(records, product_id)]


def _stored_money(value: object) -> Money:
    """Read a stored price; unreadable or negative values load as zero."""
    try:
        return Money.of(value)  # type: ignore[arg-type]
    except ValidationError:
        return Money(Decimal("0"))
