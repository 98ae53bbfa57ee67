"""Helpers for working with database/SQLAlchemy errors."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION_SQLSTATES = {"23505"}


def storage_unavailable(exc: SQLAlchemyError, action: str) -> StorageUnavailable:
    """Log ``exc`` with its traceback and return the opaque client-facing error."""

    logger.error(
        "Storage error while trying to %s", action, exc_info=(type(exc), exc, exc.__traceback__)
    )
    return StorageUnavailable()


def is_unique_violation(exc: SQLAlchemyError) -> bool:
    """Return ``True`` if ``exc`` was caused by a duplicate primary/unique key."""

    if not isinstance(exc, IntegrityError):
        return False

    orig = getattr(exc, "orig", None)
    if orig is None:
        return False

    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _UNIQUE_VIOLATION_SQLSTATES:
        return True

    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message
