"""Run/pause/reset state machine for a single stopwatch.

Elapsed time is always ``now - anchor + base``: the anchor is the clock
instant of the last transition into RUNNING and the base is the time banked
by earlier running spans.  Periodic ticks only ask the host to redraw, so a
late, skipped or coalesced tick never changes the measured time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .clock import Clock
from .ticks import TickCallback, TickHandle, TickScheduler

logger = logging.getLogger(__name__)

DEFAULT_TICK_PERIOD_MS = 10


class ClockPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class ClockState:
    """Read-only view of the engine (pure data)."""

    phase: ClockPhase
    elapsed_ms: int
    anchor_ms: int | None  # only set while RUNNING


class ClockEngine:
    """Single stopwatch clock.

    - Time is entirely via injected Clock.
    - At most one tick subscription exists, and only while RUNNING.
    """

    def __init__(
        self,
        *,
        clock: Clock,
        scheduler: TickScheduler | None = None,
        on_tick: TickCallback | None = None,
        tick_period_ms: int = DEFAULT_TICK_PERIOD_MS,
    ) -> None:
        if tick_period_ms <= 0:
            raise ValueError("tick_period_ms must be > 0")

        self._clock = clock
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._tick_period_ms = int(tick_period_ms)

        self._phase: ClockPhase = ClockPhase.IDLE
        self._elapsed_ms = 0
        self._anchor_ms: int | None = None
        self._tick: TickHandle | None = None

    @property
    def phase(self) -> ClockPhase:
        return self._phase

    @property
    def running(self) -> bool:
        return self._phase is ClockPhase.RUNNING

    @property
    def ticking(self) -> bool:
        return self._tick is not None and self._tick.active

    def state(self) -> ClockState:
        return ClockState(phase=self._phase, elapsed_ms=self._elapsed_ms, anchor_ms=self._anchor_ms)

    def start(self) -> bool:
        if self._phase is ClockPhase.RUNNING:
            return False
        self._anchor_ms = self._clock.now_ms()
        self._phase = ClockPhase.RUNNING
        self._schedule_tick()
        logger.debug("clock started at %d with base %d ms", self._anchor_ms, self._elapsed_ms)
        return True

    def pause(self) -> bool:
        # Pausing an IDLE or PAUSED clock is misuse; reject it visibly.
        if self._phase is not ClockPhase.RUNNING:
            return False
        self._elapsed_ms = self.current_elapsed()
        self._anchor_ms = None
        self._phase = ClockPhase.PAUSED
        self._cancel_tick()
        logger.debug("clock paused at %d ms", self._elapsed_ms)
        return True

    def toggle_run(self) -> ClockPhase:
        if self.running:
            self.pause()
        else:
            self.start()
        return self._phase

    def reset(self) -> None:
        self._cancel_tick()
        self._phase = ClockPhase.IDLE
        self._elapsed_ms = 0
        self._anchor_ms = None
        logger.debug("clock reset")

    def current_elapsed(self, now: int | None = None) -> int:
        if self._phase is not ClockPhase.RUNNING:
            return self._elapsed_ms
        assert self._anchor_ms is not None
        if now is None:
            now = self._clock.now_ms()
        # A sample taken before the anchor counts as no time since resume.
        return self._elapsed_ms + max(0, int(now) - self._anchor_ms)

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        if self._scheduler is None or self._on_tick is None:
            return
        self._tick = self._scheduler.schedule(self._tick_period_ms, self._handle_tick)

    def _cancel_tick(self) -> None:
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None

    def _handle_tick(self, now_ms: int) -> None:
        if self._phase is not ClockPhase.RUNNING or self._on_tick is None:
            return
        self._on_tick(self.current_elapsed(now_ms))
