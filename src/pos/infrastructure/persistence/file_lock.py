"""POSIX advisory locks on open data files.

``flock`` locks belong to the open file description, so two handles on the
same file conflict even inside one process.  That lets threads and separate
processes share the same locking discipline.
"""

from __future__ import annotations

import fcntl
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO

from pos.domain.exceptions import LockError, LockTimeoutError

logger = logging.getLogger(__name__)

SHARED = fcntl.LOCK_SH
EXCLUSIVE = fcntl.LOCK_EX

_POLL_INTERVAL = 0.01
_MAX_POLL_INTERVAL = 0.2


@contextmanager
def file_lock(handle: IO, mode: int, timeout: float | None = None) -> Iterator[None]:
    """Hold a shared or exclusive lock on ``handle`` for the block.

    With ``timeout=None`` the call blocks until the lock is granted.
    Otherwise it polls and raises LockTimeoutError after ``timeout`` seconds.
    """
    _acquire(handle, mode, timeout)
    try:
        yield
    finally:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def _acquire(handle: IO, mode: int, timeout: float | None) -> None:
    kind = "exclusive" if mode == EXCLUSIVE else "shared"
    if timeout is None:
        try:
            fcntl.flock(handle.fileno(), mode)
        except OSError as exc:
            raise LockError(f"Could not acquire {kind} lock on {handle.name}: {exc}") from exc
        return

    deadline = time.monotonic() + timeout
    delay = _POLL_INTERVAL
    while True:
        try:
            fcntl.flock(handle.fileno(), mode | fcntl.LOCK_NB)
            return
        except BlockingIOError:
            pass
        except OSError as exc:
            raise LockError(f"Could not acquire {kind} lock on {handle.name}: {exc}") from exc

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.error("Timed out after %.2fs waiting for %s lock on %s", timeout, kind, handle.name)
            raise LockTimeoutError(
                f"Timed out after {timeout:.2f}s waiting for {kind} lock on {handle.name}"
            )
        time.sleep(min(delay, remaining))
        delay = min(delay * 2, _MAX_POLL_INTERVAL)
