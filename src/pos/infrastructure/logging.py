"""Logging configuration for the POS backend."""

from __future__ import annotations

import logging
import sys
from typing import Any

from pos.infrastructure.config import Settings

PACKAGE_LOGGER = "pos"


def setup_logging(settings: Settings) -> None:
    """
    Configure the ``pos`` package logger from settings.

    One handler (stderr, or ``settings.log_file``) with either a plain text
    or a JSON-like line format.  Calling it again replaces the handler.
    """
    handler: logging.FileHandler | logging.StreamHandler[Any]
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    if settings.log_format == "json":
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"module": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(settings.log_level)

    # Close and remove existing handlers
    for old_handler in logger.handlers[:]:
        old_handler.close()
        logger.removeHandler(old_handler)

    logger.addHandler(handler)

    # Prevent propagation to root logger (avoid duplicate logs)
    logger.propagate = False
