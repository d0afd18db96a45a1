"""Cancellable periodic ticks driven by the host loop.

Nothing here sleeps or spawns threads.  The host calls
:meth:`FrameTickScheduler.pump` once per frame and every subscription whose
deadline has passed fires at most once for that pump.  Late pumps never
produce a burst of catch-up callbacks.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from .clock import Clock

TickCallback = Callable[[int], None]


class TickHandle(Protocol):
    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class TickScheduler(Protocol):
    def schedule(self, period_ms: int, callback: TickCallback) -> TickHandle:
        """Call ``callback(now_ms)`` every ``period_ms`` until cancelled."""
        ...


class _Subscription:
    __slots__ = ("period_ms", "callback", "due_ms", "_active")

    def __init__(self, period_ms: int, callback: TickCallback, due_ms: int) -> None:
        self.period_ms = period_ms
        self.callback = callback
        self.due_ms = due_ms
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class FrameTickScheduler:
    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._subs: list[_Subscription] = []

    def schedule(self, period_ms: int, callback: TickCallback) -> TickHandle:
        if period_ms <= 0:
            raise ValueError("period_ms must be > 0")
        sub = _Subscription(int(period_ms), callback, self._clock.now_ms() + int(period_ms))
        self._subs.append(sub)
        return sub

    def active_count(self) -> int:
        return sum(1 for s in self._subs if s.active)

    def pump(self) -> int:
        """Fire due subscriptions. Returns the number of callbacks made."""

        now = self._clock.now_ms()
        self._subs = [s for s in self._subs if s.active]
        fired = 0
        for sub in list(self._subs):
            # A callback may cancel other subscriptions during this pass.
            if not sub.active or now < sub.due_ms:
                continue
            sub.due_ms = now + sub.period_ms
            sub.callback(now)
            fired += 1
        return fired
