"""Logging setup that keeps every diagnostic line off stdout."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_PACKAGE_LOGGER = "reminders_mcp"


def configure_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Route the package logger to stderr through :class:`RichHandler`.

    Safe to call more than once: an existing handler installed by a previous
    call is replaced, not duplicated.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_reminders_mcp", False):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler._reminders_mcp = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger
