from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .laps import LapEntry


def format_elapsed(ms: int) -> str:
    """Render milliseconds as ``MM:SS.CC``.

    Negative input renders as zero.  Minutes are zero-padded but not wrapped,
    so an hour and a half shows as ``90:00.00`` and longer runs grow a digit.
    """

    total = max(0, int(ms))
    minutes = total // 60_000
    seconds = (total % 60_000) // 1000
    centis = (total // 10) % 100
    return f"{minutes:02d}:{seconds:02d}.{centis:02d}"


def format_lap_label(entry: LapEntry) -> str:
    return f"Lap {entry.ordinal}"
