"""
Default clock and identifier factory.
"""

import threading
import time
import uuid
from typing import Callable

from .interfaces import Clock

U64_MAX = 2 ** 64 - 1


class SystemClock(Clock):
    """Nanosecond wall clock clamped so that readings never decrease."""

    def __init__(self, source: Callable[[], int] = time.time_ns):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            reading = min(self._source(), U64_MAX)
            if reading < self._last:
                reading = self._last
            self._last = reading
            return reading


def uuid4_id() -> str:
    """Generate a random UUID4 identifier string."""
    return str(uuid.uuid4())
