"""JSON-file-backed implementation of DocumentStore.

Each collection is one ``<name>.json`` file holding a pretty-printed JSON
array.  Writes are whole-document replacements done in place under an
exclusive ``flock``; the file is never renamed, so the lock always guards
the inode that readers open.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

from pos.domain.exceptions import DecodeError, EncodeError, StorageIOError
from pos.domain.repository.document_store import DocumentStore, Record
from pos.infrastructure.persistence.file_lock import EXCLUSIVE, SHARED, file_lock

logger = logging.getLogger(__name__)


class JsonDocumentStore(DocumentStore):

    def __init__(self, data_dir: Path, lock_timeout: float | None = None) -> None:
        self._data_dir = Path(data_dir)
        self._lock_timeout = lock_timeout

    def path_for(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise ValueError(f"Invalid collection name: {name!r}")
        return self._data_dir / f"{name}.json"

    # --- DocumentStore interface ----------------------------------------------

    def load(self, name: str) -> list[Record]:
        path = self.path_for(name)
        try:
            handle = path.open("r", encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.error("Failed to open %s for reading: %s", path, exc)
            raise StorageIOError(f"Failed to open {path} for reading") from exc

        with handle:
            with file_lock(handle, SHARED, self._lock_timeout):
                text = self._read(handle, path)
        # Decoding happens after the shared lock is released.
        return self._decode(text, path)

    def save(self, name: str, records: list[Record]) -> None:
        path = self.path_for(name)
        with self._open_for_write(path) as handle:
            with file_lock(handle, EXCLUSIVE, self._lock_timeout):
                self._write(handle, path, records)

    @contextmanager
    def transaction(self, name: str) -> Iterator[list[Record]]:
        path = self.path_for(name)
        with self._open_for_write(path) as handle:
            with file_lock(handle, EXCLUSIVE, self._lock_timeout):
                handle.seek(0)
                records = self._decode(self._read(handle, path), path)
                yield records
                self._write(handle, path, records)

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _open_for_write(self, path: Path) -> Iterator[IO[str]]:
        # "a+" creates without truncating; truncation waits for the lock.
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handle = path.open("a+", encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to open %s for writing: %s", path, exc)
            raise StorageIOError(f"Failed to open {path} for writing") from exc
        with handle:
            yield handle

    @staticmethod
    def _read(handle: IO[str], path: Path) -> str:
        try:
            return handle.read()
        except UnicodeDecodeError as exc:
            logger.error("Invalid UTF-8 in %s: %s", path, exc)
            raise DecodeError(f"Invalid UTF-8 in {path}: {exc}") from exc
        except OSError as exc:
            logger.error("Failed to read %s: %s", path, exc)
            raise StorageIOError(f"Failed to read {path}") from exc

    @staticmethod
    def _decode(text: str, path: Path) -> list[Record]:
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error("JSON decode error '%s' in %s", exc, path)
            raise DecodeError(f"Malformed JSON in {path}: {exc}") from exc
        if not isinstance(data, list):
            logger.warning(
                "Decoded JSON in %s is %s, not an array; treating as empty",
                path,
                type(data).__name__,
            )
            return []
        return data

    @staticmethod
    def _write(handle: IO[str], path: Path, records: list[Record]) -> None:
        try:
            payload = json.dumps(records, indent=4, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            logger.error("JSON encode error '%s' for %s", exc, path)
            raise EncodeError(f"Cannot serialize records for {path}: {exc}") from exc

        try:
            handle.seek(0)
            handle.truncate()
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            raise StorageIOError(f"Failed to write {path}") from exc
