"""Centralized logging helper.

Every module asks for its logger through :func:`get_logger` so handlers and
format are configured in one place.
"""

from __future__ import annotations

import logging
import os
import sys

_FORMAT = "[%(asctime)s] %(levelname)s in %(module)s: %(message)s"

_managed: set[str] = set()


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the project's standard stream handler.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    logger = logging.getLogger(name)

    # Avoid stacking handlers when a module is imported more than once.
    if not logger.handlers:
        logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)

    _managed.add(name)
    return logger


def set_level(level: str) -> None:
    """Apply a level from the settings module to every logger handed out so far."""
    for name in _managed:
        logging.getLogger(name).setLevel(level.upper())
