"""Reverse-timestamp keys for the match log.

The store hands rows back in ascending key order. Encoding the played-at
instant as ``MAX_TIMESTAMP_MS - millis`` and zero-padding it makes that
ascending order the same as newest-first, so listing needs no sort step.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from ..time_utils import to_epoch_millis

# 9999-12-31T23:59:59.999Z
MAX_TIMESTAMP_MS = 253_402_300_799_999
KEY_WIDTH = 20
KEY_SEPARATOR = "_"


def generate_match_key(played_at: datetime, suffix: str | None = None) -> str:
    """Return the log key for a match played at ``played_at``.

    Args:
        played_at: When the match was played. Naive values are taken as UTC.
        suffix: Uniqueness token appended after the timestamp part. A fresh
            ``uuid4`` hex string is used when omitted, so two matches played in
            the same millisecond still get distinct keys (in arbitrary order).

    Raises:
        ValueError: If ``played_at`` lies beyond ``MAX_TIMESTAMP_MS``.
    """

    played_ms = to_epoch_millis(played_at)
    reverse = MAX_TIMESTAMP_MS - played_ms
    if reverse < 0:
        raise ValueError("played_at is beyond the supported range")
    token = suffix if suffix is not None else uuid.uuid4().hex
    if not token:
        raise ValueError("suffix must not be empty")
    return f"{reverse:0{KEY_WIDTH}d}{KEY_SEPARATOR}{token}"


def decode_match_key(key: str) -> int:
    """Return the played-at epoch milliseconds encoded in ``key``."""

    prefix, sep, _ = key.partition(KEY_SEPARATOR)
    if not sep or len(prefix) != KEY_WIDTH or not prefix.isdigit():
        raise ValueError(f"not a match key: {key!r}")
    return MAX_TIMESTAMP_MS - int(prefix)
