"""Abstract document store: named collections persisted as whole documents.

A collection is an ordered list of loosely-typed records (``dict`` of field
name to value).  Implementations guarantee that:

- ``load`` holds a *shared* lock only while the bytes are captured;
- ``save`` holds an *exclusive* lock until the new document is flushed;
- ``transaction`` holds the *exclusive* lock across read, modify and write,
  so a check made on the yielded records is still true when they are saved.

A collection that was never written loads as an empty list.  Every other
failure raises a ``StorageError`` subclass; nothing is silently turned into
"no data".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Any

Record = dict[str, Any]


class DocumentStore(ABC):

    @abstractmethod
    def load(self, name: str) -> list[Record]:
        """Return every record of the collection, or [] if it does not exist."""

    @abstractmethod
    def save(self, name: str, records: list[Record]) -> None:
        """Replace the whole collection with ``records``."""

    @abstractmethod
    def transaction(self, name: str) -> AbstractContextManager[list[Record]]:
        """Exclusive read-modify-write of one collection.

        Yields the decoded records.  Mutate the list in place; it is written
        back when the block exits normally and discarded if it raises.
        """


def iter_matching(records: list[Record], key: str, value: str) -> Iterator[tuple[int, Record]]:
    """Yield (index, record) for records whose ``key`` equals ``value`` as a string."""
    for index, record in enumerate(records):
        if isinstance(record, dict) and key in record and str(record[key]) == value:
            yield index, record
