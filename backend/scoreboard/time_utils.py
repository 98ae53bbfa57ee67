"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def require_utc(value: datetime | None, *, field_name: str = "timestamp") -> datetime | None:
    """Ensure ``value`` includes timezone info and return a UTC-normalized copy.

    Args:
        value: The datetime to validate.
        field_name: Human-readable name used in validation errors.

    Returns:
        A timezone-aware datetime normalized to UTC, or ``None`` if ``value`` is
        ``None``.

    Raises:
        ValueError: If ``value`` is timezone-naive.
    """

    if value is None:
        return None

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{field_name} must include a timezone offset")

    return value.astimezone(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def coerce_utc(value: datetime | None) -> datetime | None:
    """Return a UTC-normalized datetime, assuming naive values are already UTC."""

    if value is None:
        return None

    return _as_utc(value)


def utcnow() -> datetime:
    """Return a timezone-aware UTC ``datetime``."""

    return datetime.now(timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    """Milliseconds since the Unix epoch for ``value`` (naive means UTC)."""

    return (_as_utc(value) - _EPOCH) // timedelta(milliseconds=1)


def format_rfc3339(value: datetime) -> str:
    """Serialize ``value`` as RFC 3339 text in UTC."""

    return _as_utc(value).isoformat()


def parse_rfc3339(raw: str) -> datetime:
    """Parse RFC 3339 text produced by :func:`format_rfc3339`.

    Raises ``ValueError`` for anything that is not a timezone-aware timestamp.
    """

    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("timestamp is empty")
    text = raw.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return require_utc(parsed)
