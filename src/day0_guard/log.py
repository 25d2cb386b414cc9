"""Logging setup for the Day-0 guard."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAME = "day0_guard"


def setup_logging(level: int = logging.INFO, verbose: bool = False) -> logging.Logger:
    """Attach a rich console handler to the package logger.

    Modules log through ``logging.getLogger(__name__)``; this only decides
    where those records go. Calling it twice replaces the handler.
    """
    if verbose:
        level = logging.DEBUG

    console = Console(
        stderr=True,
        theme=Theme(
            {
                "logging.level.info": "cyan",
                "logging.level.warning": "yellow",
                "logging.level.error": "red",
            }
        ),
    )
    handler = RichHandler(console=console, show_time=True, show_path=False)
    handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logger
