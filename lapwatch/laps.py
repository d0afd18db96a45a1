"""Ordered, append-only lap history and its persisted text form."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from .formatting import format_elapsed

logger = logging.getLogger(__name__)


class LapDataError(ValueError):
    """Persisted lap text could not be turned back into laps."""


@dataclass(frozen=True, slots=True)
class LapEntry:
    ordinal: int  # 1-based creation order
    elapsed_ms: int

    def to_dict(self) -> dict[str, object]:
        return {
            "ordinal": self.ordinal,
            "elapsed_ms": self.elapsed_ms,
            "formatted": format_elapsed(self.elapsed_ms),
        }


def _as_int(value: object, field: str) -> int:
    # bool is an int subclass but never a valid count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise LapDataError(f"{field} must be an integer, got {value!r}")
    return value


def parse_laps(raw: str) -> list[LapEntry]:
    """Parse serialized laps into creation order (oldest first)."""

    try:
        payload = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as exc:
        raise LapDataError(f"lap data is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise LapDataError("lap data must be a JSON array")

    entries: list[LapEntry] = []
    seen: set[int] = set()
    for item in payload:
        if not isinstance(item, dict):
            raise LapDataError(f"lap record must be an object, got {item!r}")
        ordinal = _as_int(item.get("ordinal"), "ordinal")
        elapsed_ms = _as_int(item.get("elapsed_ms"), "elapsed_ms")
        if ordinal < 1:
            raise LapDataError(f"ordinal must be >= 1, got {ordinal}")
        if elapsed_ms < 0:
            raise LapDataError(f"elapsed_ms must be >= 0, got {elapsed_ms}")
        if ordinal in seen:
            raise LapDataError(f"duplicate ordinal {ordinal}")
        seen.add(ordinal)
        entries.append(LapEntry(ordinal=ordinal, elapsed_ms=elapsed_ms))

    entries.sort(key=lambda e: e.ordinal)
    return entries


class LapStore:
    """Laps recorded against one clock.

    Storage is oldest-first; :meth:`laps` presents most-recent-first.
    """

    def __init__(self) -> None:
        self._entries: list[LapEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def laps(self) -> tuple[LapEntry, ...]:
        return tuple(reversed(self._entries))

    def latest(self) -> LapEntry | None:
        return self._entries[-1] if self._entries else None

    def record_lap(self, elapsed_ms: int) -> LapEntry | None:
        """Record a lap. Returns None when the clock has not run yet."""

        elapsed_ms = int(elapsed_ms)
        if elapsed_ms < 0:
            raise ValueError("elapsed_ms must be >= 0")
        if elapsed_ms == 0:
            return None
        last = self.latest()
        entry = LapEntry(ordinal=1 if last is None else last.ordinal + 1, elapsed_ms=elapsed_ms)
        self._entries.append(entry)
        return entry

    def clear_laps(self) -> None:
        self._entries.clear()

    def load(self, raw: str | None) -> bool:
        """Replace the collection with persisted laps.

        Returns False if ``raw`` was malformed; the collection is then empty,
        exactly as if nothing had been persisted.
        """

        self._entries = []
        if raw is None:
            return True
        try:
            self._entries = parse_laps(raw)
        except LapDataError as exc:
            logger.warning("discarding persisted laps: %s", exc)
            return False
        return True

    def serialize(self) -> str:
        return json.dumps([entry.to_dict() for entry in self.laps()])
