"""Smoke tests for the pygame UI.

These run the main loop for a handful of frames under the SDL dummy video
driver.  They check that the shell wires into the session without raising,
not that anything is drawn correctly.
"""

from __future__ import annotations

import os
from pathlib import Path

# Use the dummy drivers before importing pygame or the application
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")


def test_app_runs_headless(tmp_path: Path) -> None:
    from lapwatch.app import run
    from lapwatch.config import StopwatchConfig

    cfg = StopwatchConfig(state_path=tmp_path / "state.sqlite3")
    assert run(max_frames=3, config=cfg) == 0


def test_keys_drive_session_and_persist() -> None:
    import pygame

    from lapwatch.app import run
    from lapwatch.persistence import DISPLAY_MODE_KEY, LAPS_KEY, MemoryStore

    store = MemoryStore()

    def key(k: int) -> None:
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": k, "unicode": ""}))

    def inject(frame: int) -> None:
        if frame == 1:
            key(pygame.K_SPACE)
        elif frame == 6:
            key(pygame.K_l)
        elif frame == 7:
            key(pygame.K_d)
        elif frame == 9:
            key(pygame.K_r)
        elif frame == 10:
            key(pygame.K_c)
        elif frame == 12:
            key(pygame.K_ESCAPE)

    assert run(max_frames=30, event_injector=inject, store=store) == 0
    assert store.load(DISPLAY_MODE_KEY) == "false"
    # The lap was written, then R reset the clock and C cleared the list.
    assert store.load(LAPS_KEY) == "[]"
