from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .clock_engine import DEFAULT_TICK_PERIOD_MS
from .persistence import SqliteStore

TICK_PERIOD_ENV = "LAPWATCH_TICK_MS"
LOG_LEVEL_ENV = "LAPWATCH_LOG_LEVEL"

WINDOW_SIZE = (480, 640)
TARGET_FPS = 60


@dataclass(frozen=True, slots=True)
class StopwatchConfig:
    state_path: Path = field(default_factory=SqliteStore.default_path)
    tick_period_ms: int = DEFAULT_TICK_PERIOD_MS
    window_size: tuple[int, int] = WINDOW_SIZE
    target_fps: int = TARGET_FPS
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "StopwatchConfig":
        tick = _as_int(os.environ.get(TICK_PERIOD_ENV), DEFAULT_TICK_PERIOD_MS)
        if tick <= 0:
            tick = DEFAULT_TICK_PERIOD_MS
        level = os.environ.get(LOG_LEVEL_ENV, "").strip().upper() or "WARNING"
        return cls(
            state_path=SqliteStore.default_path(),
            tick_period_ms=tick,
            log_level=level,
        )


def _as_int(value: str | None, fallback: int) -> int:
    if value is None:
        return fallback
    try:
        return int(value.strip())
    except ValueError:
        return fallback
