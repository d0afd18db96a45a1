from __future__ import annotations

import logging

from .app import run
from .config import StopwatchConfig


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """Entry point for running the stopwatch from the command line."""
    config = StopwatchConfig.from_env()
    configure_logging(config.log_level)
    return run(config=config)


if __name__ == "__main__":
    raise SystemExit(main())
