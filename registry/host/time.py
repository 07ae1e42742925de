"""Time and timestamp utilities.

Ledger timestamps are integer nanoseconds since the Unix epoch, UTC.
"""

import threading
import time
from typing import Callable, Protocol


class Clock(Protocol):
    """Source of ledger timestamps."""

    def now(self) -> int:
        """Return the current time in nanoseconds since the epoch."""
        ...


class SystemClock:
    """Wall clock that never runs backwards.

    If the host clock steps back, the last issued value is repeated instead.
    """

    def __init__(self, source: Callable[[], int] = time.time_ns):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            current = max(self._source(), self._last)
            self._last = current
            return current
