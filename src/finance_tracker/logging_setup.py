"""Centralized logging configuration for the ``finance_tracker`` package.

- ``configure_logging(...)``: attach a single rich handler to the package
  root logger. Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger, making sure the package root has a
  ``NullHandler`` when nothing configured it (library use, tests).

Library modules never attach their own handlers.
"""
import logging
import os
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

_PKG_LOGGER_NAME = "finance_tracker"
_CONFIGURED = False


def _parse_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    env_val = os.getenv("FINANCE_TRACKER_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: Union[int, str, None] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Configure the package root logger exactly once.

    Args:
        level: Level as int or name ("DEBUG"). When None, falls back to
            FINANCE_TRACKER_LOG_LEVEL, then WARNING.
        console: Rich console to log to (defaults to stderr)
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until the application configures one"""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
