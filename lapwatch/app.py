"""Pygame UI shell for Lapwatch.

Deterministic timing/lap/preference state lives in lapwatch/* (core modules);
this module only draws a SessionSnapshot and maps keys to session calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import pygame

from .clock import RealClock
from .clock_engine import ClockPhase
from .config import StopwatchConfig
from .formatting import format_elapsed, format_lap_label
from .laps import LapEntry
from .persistence import KeyValueStore, SqliteStore
from .preferences import DisplayMode
from .session import StopwatchSession

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None:
        ...

    def render(self, surface: pygame.Surface) -> None:
        ...


@dataclass(frozen=True, slots=True)
class Palette:
    bg: Color
    panel_bg: Color
    border: Color
    text_main: Color
    text_muted: Color
    accent: Color
    running: Color
    row_even: Color
    row_odd: Color


PALETTES: dict[DisplayMode, Palette] = {
    DisplayMode.DARK: Palette(
        bg=(15, 23, 42),
        panel_bg=(38, 30, 72),
        border=(120, 110, 170),
        text_main=(245, 245, 250),
        text_muted=(203, 213, 225),
        accent=(99, 102, 241),
        running=(239, 68, 68),
        row_even=(46, 40, 84),
        row_odd=(54, 48, 94),
    ),
    DisplayMode.LIGHT: Palette(
        bg=(238, 242, 255),
        panel_bg=(255, 255, 255),
        border=(209, 213, 219),
        text_main=(17, 24, 39),
        text_muted=(75, 85, 99),
        accent=(59, 130, 246),
        running=(220, 38, 38),
        row_even=(249, 250, 251),
        row_odd=(243, 244, 246),
    ),
}

MAX_VISIBLE_LAPS = 8


class App:
    def __init__(self, surface: pygame.Surface) -> None:
        self._surface = surface
        self._screens: list[Screen] = []
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


class StopwatchScreen:
    def __init__(self, app: App, session: StopwatchSession) -> None:
        self._app = app
        self._session = session
        self._time_font = pygame.font.Font(None, 96)
        self._title_font = pygame.font.Font(None, 42)
        self._row_font = pygame.font.Font(None, 30)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        key = event.key
        if key in (pygame.K_SPACE, pygame.K_RETURN, pygame.K_KP_ENTER):
            self._session.toggle_run()
        elif key == pygame.K_l:
            self._session.record_lap()
        elif key == pygame.K_r:
            self._session.reset()
        elif key == pygame.K_c:
            self._session.clear_laps()
        elif key == pygame.K_d:
            self._session.toggle_display_mode()
        elif key == pygame.K_ESCAPE:
            self._app.quit()

    def render(self, surface: pygame.Surface) -> None:
        snap = self._session.snapshot()
        pal = PALETTES[snap.display_mode]
        w, h = surface.get_size()

        surface.fill(pal.bg)

        title = self._title_font.render("Stopwatch", True, pal.text_main)
        surface.blit(title, title.get_rect(midtop=(w // 2, 20)))

        card = pygame.Rect(20, 70, w - 40, 170)
        pygame.draw.rect(surface, pal.panel_bg, card, border_radius=18)
        pygame.draw.rect(surface, pal.border, card, 2, border_radius=18)

        shown_ms = self._session.displayed_ms if snap.phase is ClockPhase.RUNNING else snap.elapsed_ms
        time_color = pal.running if snap.phase is ClockPhase.RUNNING else pal.text_main
        digits = self._time_font.render(format_elapsed(shown_ms), True, time_color)
        surface.blit(digits, digits.get_rect(center=(card.centerx, card.y + 70)))

        unit = self._hint_font.render("MM:SS.CC", True, pal.text_muted)
        surface.blit(unit, unit.get_rect(center=(card.centerx, card.y + 125)))

        lap_hint = "L: Lap" if snap.can_record_lap else "L: Lap (start first)"
        run_hint = "Space: Pause" if snap.phase is ClockPhase.RUNNING else "Space: Start"
        controls = self._hint_font.render(f"{run_hint}  |  {lap_hint}  |  R: Reset", True, pal.text_muted)
        surface.blit(controls, controls.get_rect(center=(card.centerx, card.bottom - 18)))

        if snap.laps:
            self._render_laps(surface, pal, snap.laps, top=card.bottom + 20)

        footer = "C: Clear laps  |  D: Light/Dark  |  Esc: Quit"
        foot = self._hint_font.render(footer, True, pal.text_muted)
        surface.blit(foot, foot.get_rect(midbottom=(w // 2, h - 10)))

    def _render_laps(
        self,
        surface: pygame.Surface,
        pal: Palette,
        laps: tuple[LapEntry, ...],
        *,
        top: int,
    ) -> None:
        w, h = surface.get_size()
        panel = pygame.Rect(20, top, w - 40, max(80, h - top - 40))
        pygame.draw.rect(surface, pal.panel_bg, panel, border_radius=18)
        pygame.draw.rect(surface, pal.border, panel, 2, border_radius=18)

        header = self._row_font.render(f"Lap Times ({len(laps)})", True, pal.accent)
        surface.blit(header, (panel.x + 16, panel.y + 12))

        row_h = 34
        y = panel.y + 48
        for idx, lap in enumerate(laps[:MAX_VISIBLE_LAPS]):
            if y + row_h > panel.bottom - 8:
                break
            row = pygame.Rect(panel.x + 12, y, panel.w - 24, row_h - 4)
            pygame.draw.rect(surface, pal.row_even if idx % 2 == 0 else pal.row_odd, row, border_radius=10)
            label = self._row_font.render(format_lap_label(lap), True, pal.text_muted)
            value = self._row_font.render(format_elapsed(lap.elapsed_ms), True, pal.text_main)
            surface.blit(label, (row.x + 10, row.y + (row.h - label.get_height()) // 2))
            surface.blit(value, value.get_rect(midright=(row.right - 10, row.centery)))
            y += row_h


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    config: StopwatchConfig | None = None,
    store: KeyValueStore | None = None,
) -> int:
    cfg = config if config is not None else StopwatchConfig.from_env()
    kv = store if store is not None else SqliteStore(cfg.state_path)

    session = StopwatchSession(clock=RealClock(), store=kv, tick_period_ms=cfg.tick_period_ms)
    if not session.restore():
        logger.warning("persisted laps were unreadable; starting with an empty list")

    pygame.init()
    pygame.display.set_caption("Lapwatch")
    surface = pygame.display.set_mode(cfg.window_size, pygame.RESIZABLE)
    frame_clock = pygame.time.Clock()

    app = App(surface=surface)
    app.push(StopwatchScreen(app, session))

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            session.pump()
            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            frame_clock.tick(cfg.target_fps)
    finally:
        pygame.quit()

    return 0
