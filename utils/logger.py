"""
Logging utilities for the WhatsApp bot.
Uses Rich for colored console output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Custom theme for logging
CUSTOM_THEME = Theme({
    "logging.level.command": "cyan",
    "logging.level.debug": "dim cyan",
    "logging.level.warning": "yellow",
})

console = Console(theme=CUSTOM_THEME)

# All bot loggers live under this namespace so one level switch covers them
ROOT_LOGGER = "selfwa"

_default_level = logging.INFO


def set_default_level(level: int) -> None:
    """
    Change the level used by loggers created from now on and by existing ones.

    Args:
        level: Logging level
    """
    global _default_level
    _default_level = level
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def setup_logging(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Set up a logger that writes through the shared RichHandler.

    Args:
        name: Logger name
        level: Logging level (default: module default, INFO unless changed)

    Returns:
        Configured logger instance
    """
    root = logging.getLogger(ROOT_LOGGER)

    if not root.handlers:
        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(
            fmt="[%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        ))
        handler.setLevel(_default_level)
        root.addHandler(handler)
        root.setLevel(_default_level)
        root.propagate = False

    logger = root.getChild(name)
    if level is not None:
        logger.setLevel(level)

    return logger


class LoggerMixin:
    """Mixin class that provides logger functionality."""

    def __init__(self, name: str):
        self._logger = setup_logging(name)

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return setup_logging(name)
