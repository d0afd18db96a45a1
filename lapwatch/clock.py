from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic millisecond clock abstraction.

    Core logic depends on this interface rather than calling real time directly.
    """

    def now_ms(self) -> int:
        """Return monotonic milliseconds."""


class RealClock:
    """Production clock backed by time.monotonic_ns()."""

    def now_ms(self) -> int:
        return time.monotonic_ns() // 1_000_000
