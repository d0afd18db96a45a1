"""Host-side wiring of clock, laps, preferences and storage.

The engine and stores never touch storage themselves.  Every operation here
that changes laps or preferences ends with an explicit best-effort save, so
a failing store costs durability but never in-memory state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .clock import Clock
from .clock_engine import DEFAULT_TICK_PERIOD_MS, ClockEngine, ClockPhase
from .laps import LapEntry, LapStore
from .persistence import (
    DISPLAY_MODE_KEY,
    LAPS_KEY,
    KeyValueStore,
    load_best_effort,
    save_best_effort,
)
from .preferences import DisplayMode, Preferences
from .ticks import FrameTickScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """View model for the UI (pure data)."""

    phase: ClockPhase
    elapsed_ms: int
    laps: tuple[LapEntry, ...]
    display_mode: DisplayMode
    can_record_lap: bool


class StopwatchSession:
    def __init__(
        self,
        *,
        clock: Clock,
        store: KeyValueStore,
        tick_period_ms: int = DEFAULT_TICK_PERIOD_MS,
    ) -> None:
        self._clock = clock
        self._store = store
        self._scheduler = FrameTickScheduler(clock)
        self._displayed_ms = 0
        self.engine = ClockEngine(
            clock=clock,
            scheduler=self._scheduler,
            on_tick=self._on_tick,
            tick_period_ms=tick_period_ms,
        )
        self.lap_store = LapStore()
        self.preferences = Preferences()

    @property
    def display_mode(self) -> DisplayMode:
        return self.preferences.display_mode

    @property
    def displayed_ms(self) -> int:
        """Elapsed time as of the last tick or transition."""
        return self._displayed_ms

    def restore(self) -> bool:
        """Load laps and preferences. Returns False if persisted laps were discarded."""

        laps_ok = self.lap_store.load(load_best_effort(self._store, LAPS_KEY))
        mode = self.preferences.load(load_best_effort(self._store, DISPLAY_MODE_KEY))
        logger.info("restored %d laps, display mode %s", len(self.lap_store), mode.value)
        return laps_ok

    def toggle_run(self) -> ClockPhase:
        phase = self.engine.toggle_run()
        self._displayed_ms = self.engine.current_elapsed()
        return phase

    def reset(self) -> None:
        self.engine.reset()
        self._displayed_ms = 0

    def current_elapsed(self, now: int | None = None) -> int:
        return self.engine.current_elapsed(now)

    def record_lap(self) -> LapEntry | None:
        entry = self.lap_store.record_lap(self.engine.current_elapsed())
        if entry is not None:
            self._save_laps()
        return entry

    def clear_laps(self) -> None:
        self.lap_store.clear_laps()
        self._save_laps()

    def laps(self) -> tuple[LapEntry, ...]:
        return self.lap_store.laps()

    def toggle_display_mode(self) -> DisplayMode:
        mode = self.preferences.toggle_display_mode()
        save_best_effort(self._store, DISPLAY_MODE_KEY, self.preferences.serialize())
        return mode

    def pump(self) -> int:
        return self._scheduler.pump()

    def snapshot(self) -> SessionSnapshot:
        elapsed = self.engine.current_elapsed()
        return SessionSnapshot(
            phase=self.engine.phase,
            elapsed_ms=elapsed,
            laps=self.lap_store.laps(),
            display_mode=self.preferences.display_mode,
            can_record_lap=elapsed > 0,
        )

    def _save_laps(self) -> None:
        save_best_effort(self._store, LAPS_KEY, self.lap_store.serialize())

    def _on_tick(self, elapsed_ms: int) -> None:
        self._displayed_ms = elapsed_ms
