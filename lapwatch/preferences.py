from __future__ import annotations

import json
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class DisplayMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"


DEFAULT_DISPLAY_MODE = DisplayMode.DARK


class Preferences:
    """Display preference persisted as a JSON boolean (true = dark)."""

    def __init__(self, display_mode: DisplayMode = DEFAULT_DISPLAY_MODE) -> None:
        self._display_mode = display_mode

    @property
    def display_mode(self) -> DisplayMode:
        return self._display_mode

    @property
    def is_dark(self) -> bool:
        return self._display_mode is DisplayMode.DARK

    def toggle_display_mode(self) -> DisplayMode:
        self._display_mode = DisplayMode.LIGHT if self.is_dark else DisplayMode.DARK
        return self._display_mode

    def load(self, raw: str | None) -> DisplayMode:
        self._display_mode = _parse_display_mode(raw)
        return self._display_mode

    def serialize(self) -> str:
        return json.dumps(self.is_dark)


def _parse_display_mode(raw: str | None) -> DisplayMode:
    if raw is None:
        return DEFAULT_DISPLAY_MODE
    try:
        value = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        logger.debug("unreadable display mode %r, using default", raw)
        return DEFAULT_DISPLAY_MODE
    if isinstance(value, bool):
        return DisplayMode.DARK if value else DisplayMode.LIGHT
    if isinstance(value, str):
        try:
            return DisplayMode(value.strip().lower())
        except ValueError:
            pass
    logger.debug("unknown display mode %r, using default", value)
    return DEFAULT_DISPLAY_MODE
