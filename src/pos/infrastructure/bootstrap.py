"""Composition root: builds the stores, repositories and handlers from Settings.

Each CLI command asks for what it needs.  Handlers receive collaborators,
never Settings.
"""

from __future__ import annotations

from pos.application.process_sale import ProcessSaleHandler
from pos.infrastructure.clock import Clock, zoned_clock
from pos.infrastructure.config import Settings
from pos.infrastructure.persistence.document_product_repository import (
    DocumentProductRepository,
)
from pos.infrastructure.persistence.document_sale_ledger import DocumentSaleLedger
from pos.infrastructure.persistence.json_document_store import JsonDocumentStore


def document_store(settings: Settings) -> JsonDocumentStore:
    return JsonDocumentStore(settings.data_dir, lock_timeout=settings.lock_timeout)


def clock(settings: Settings) -> Clock:
    return zoned_clock(settings.tzinfo)


def product_repository(settings: Settings) -> DocumentProductRepository:
    return DocumentProductRepository(document_store(settings))


def sale_ledger(settings: Settings) -> DocumentSaleLedger:
    return DocumentSaleLedger(document_store(settings), clock(settings))


def process_sale_handler(settings: Settings) -> ProcessSaleHandler:
    return ProcessSaleHandler(
        product_repo=product_repository(settings),
        sale_ledger=sale_ledger(settings),
        clock=clock(settings),
        store_name=settings.store_name,
    )
