"""Domain-level and storage-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Storage failures form a separate hierarchy rooted at StorageError. They carry
internal detail (paths, OS errors) that is logged but never shown to users.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InsufficientStockError(ValidationError):
    """A stock change would take a product below zero."""

    def __init__(self, product_id: str, requested: int, available: int, name: str | None = None) -> None:
        label = name or product_id
        super().__init__(
            f"Insufficient stock for Product '{label}'. "
            f"Requested: {requested}, Available: {available}."
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConflictError(DomainException):
    """An entity with the same identity already exists."""


class SaleRejectedError(DomainException):
    """A sale failed validation; carries every failing item, not just the first."""

    def __init__(self, problems: list[DomainException]) -> None:
        detail = " ".join(str(p) for p in problems)
        super().__init__(f"Sale cannot be completed: {detail}")
        self.problems = problems


class ServerFaultError(DomainException):
    """An infrastructure failure stopped an operation mid-way."""


class StorageError(Exception):
    """Base class for document storage failures."""


class StorageIOError(StorageError):
    """Opening, reading or writing a document failed."""


class LockError(StorageError):
    """A required shared or exclusive lock could not be acquired."""


class LockTimeoutError(LockError):
    """A lock was not granted within the configured wait."""


class DecodeError(StorageError):
    """Stored content is not valid structured data."""


class EncodeError(StorageError):
    """An in-memory record could not be serialized."""
