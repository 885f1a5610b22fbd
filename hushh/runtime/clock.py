"""
Clock sources for the ledger.

The ledger never reads wall-clock time directly; it asks a ``Clock`` for
``now()`` once per transaction and derives a non-decreasing block timestamp
from it. Tests use ``ManualClock`` to pin timestamps.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable

from ..errors import LedgerError


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall clock, whole seconds since the epoch."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """A clock that only moves when told to, and never backwards."""

    def __init__(self, start: int = 0) -> None:
        if isinstance(start, bool) or not isinstance(start, int) or start < 0:
            raise LedgerError("clock start must be a non-negative int", details={"start": start})
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds < 0:
            raise LedgerError("clock can only advance by a non-negative int", details={"seconds": seconds})
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> int:
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise LedgerError("timestamp must be an int")
        if timestamp < self._now:
            raise LedgerError(
                "clock cannot move backwards", details={"now": self._now, "requested": timestamp}
            )
        self._now = timestamp
        return self._now


__all__ = ["Clock", "SystemClock", "ManualClock"]
