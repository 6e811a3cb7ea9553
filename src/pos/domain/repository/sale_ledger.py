"""Abstract append-only ledger of completed sales."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.sale import Sale, SaleId


class SaleLedger(ABC):

    @abstractmethod
    def generate_sale_id(self) -> SaleId:
        """Derive the next ID for today.  Read-only: nothing is reserved."""

    @abstractmethod
    def append(self, sale: Sale) -> None:
        """Record a completed sale.  Existing records are never touched."""

    @abstractmethod
    def by_date(self, date_string: str) -> list[Sale]:
        """Sales whose timestamp falls on ``YYYY-MM-DD``."""
