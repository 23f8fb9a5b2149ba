"""Logging setup for deskcalc."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> logging.Logger:
    """Attach a rich handler to the package logger.

    Calling it again only changes the level.

    Args:
        level: Level name, e.g. "DEBUG".
        console: Console for log output; stderr by default.

    Returns:
        The "deskcalc" logger.
    """
    logger = logging.getLogger("deskcalc")

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    logger.setLevel(level.upper())
    return logger
