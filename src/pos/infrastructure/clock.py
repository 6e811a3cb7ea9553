"""Server wall clock in the store's configured timezone."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, tzinfo

Clock = Callable[[], datetime]


def zoned_clock(zone: tzinfo) -> Clock:
    """A clock returning the current, offset-aware time in ``zone``.

    Timestamps are truncated to whole seconds so stored values and the
    receipts built from them agree.
    """

    def now() -> datetime:
        return datetime.now(zone).replace(microsecond=0)

    return now
