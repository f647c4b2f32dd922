"""Logging utilities for the configurator package."""

from __future__ import annotations

import logging
from typing import Any, Literal

from rich.console import Console
from rich.logging import RichHandler

_PACKAGE_LOGGER_NAME = "configurator"
_CONFIGURED = False


def _qualify(name: str | None) -> str:
    if not name:
        return _PACKAGE_LOGGER_NAME
    if name.startswith(_PACKAGE_LOGGER_NAME):
        return name
    return f"{_PACKAGE_LOGGER_NAME}.{name}"


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | int = "INFO",
    **rich_kwargs: Any,
) -> logging.Logger:
    """Route package logs through a single rich handler on stderr.

    Calling this again replaces the handler instead of stacking a second one,
    so binders may reconfigure the level after startup.
    """

    global _CONFIGURED

    logger = logging.getLogger(_PACKAGE_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    rich_kwargs.setdefault("console", Console(stderr=True))
    rich_kwargs.setdefault("show_path", False)
    handler = RichHandler(**rich_kwargs)
    logger.addHandler(handler)
    logger.setLevel(level)

    _CONFIGURED = True
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger scoped to the package namespace."""

    if not _CONFIGURED:
        configure_logging()

    qualified = _qualify(name)
    return logging.getLogger(qualified)
