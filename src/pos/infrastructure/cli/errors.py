"""Translate application errors into CLI output."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import click

from pos.domain.exceptions import DomainException, StorageError

logger = logging.getLogger(__name__)

STORAGE_UNAVAILABLE = "The data store is unavailable. Please try again or contact support."


@contextmanager
def user_errors() -> Iterator[None]:
    """Show domain errors verbatim; log storage errors and show a generic message."""
    try:
        yield
    except DomainException as exc:
        raise click.ClickException(str(exc)) from exc
    except StorageError as exc:
        logger.exception("Storage failure")
        raise click.ClickException(STORAGE_UNAVAILABLE) from exc
