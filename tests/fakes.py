"""In-memory fakes for testing.

FakeDocumentStore implements the same abstract interface as the JSON store
but keeps everything in a dict. No file I/O, no side effects.  Records are
deep-copied in and out so callers can never alias stored state, just as a
serialize/deserialize round-trip would guarantee.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

from pos.domain.exceptions import StorageError
from pos.domain.repository.document_store import DocumentStore, Record

COLOMBO = timezone(timedelta(hours=5, minutes=30))


class FakeDocumentStore(DocumentStore):

    def __init__(self, collections: dict[str, list[Record]] | None = None) -> None:
        self._data: dict[str, list[Record]] = copy.deepcopy(collections or {})
        self._lock = threading.Lock()
        self.fail_loads: dict[str, StorageError] = {}
        self.fail_writes: dict[str, StorageError] = {}
        self.writes: list[str] = []

    def load(self, name: str) -> list[Record]:
        if name in self.fail_loads:
            raise self.fail_loads[name]
        with self._lock:
            return copy.deepcopy(self._data.get(name, []))

    def save(self, name: str, records: list[Record]) -> None:
        if name in self.fail_writes:
            raise self.fail_writes[name]
        with self._lock:
            self._data[name] = copy.deepcopy(records)
            self.writes.append(name)

    @contextmanager
    def transaction(self, name: str) -> Iterator[list[Record]]:
        with self._lock:
            if name in self.fail_loads:
                raise self.fail_loads[name]
            records = copy.deepcopy(self._data.get(name, []))
            yield records
            if name in self.fail_writes:
                raise self.fail_writes[name]
            self._data[name] = copy.deepcopy(records)
            self.writes.append(name)

    # --- Test helpers ---------------------------------------------------------

    def raw(self, name: str) -> list[Record]:
        return copy.deepcopy(self._data.get(name, []))


class FakeClock:
    """A settable clock; defaults to a fixed afternoon in UTC+05:30."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2025, 4, 7, 14, 3, 19, tzinfo=COLOMBO)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)
