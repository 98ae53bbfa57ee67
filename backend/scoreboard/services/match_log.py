"""Append-only match log backed by the ``match`` table.

Rows are keyed by :func:`~scoreboard.services.ordering.generate_match_key`,
so reading them in primary-key order yields the newest match first.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db_errors import storage_unavailable
from ..exceptions import MalformedRecord, MatchNotFound
from ..models import Match
from ..schemas import MatchCreate
from ..time_utils import format_rfc3339, utcnow
from .ordering import generate_match_key
from .records import MatchRecord

logger = logging.getLogger(__name__)


def new_match_record(
    body: MatchCreate, recorded_by: str, *, now: datetime | None = None
) -> MatchRecord:
    """Build an unsaved record, assigning its log key from ``played_at``."""

    played_at = body.played_at or now or utcnow()
    return MatchRecord(
        id=generate_match_key(played_at),
        winner1_id=body.winner1_id,
        winner2_id=body.winner2_id,
        loser1_id=body.loser1_id,
        loser2_id=body.loser2_id,
        winner_score=body.winner_score,
        loser_score=body.loser_score,
        comment=body.comment,
        recorded_by=recorded_by,
        played_at=played_at,
    )


async def append_match(session: AsyncSession, record: MatchRecord) -> MatchRecord:
    row = Match(**{**record._asdict(), "played_at": format_rfc3339(record.played_at)})
    session.add(row)
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise storage_unavailable(exc, f"append match {record.id!r}")
    logger.info("Recorded match %s by %s", record.id, record.recorded_by)
    return record


async def list_matches(
    session: AsyncSession, limit: int | None = None
) -> list[MatchRecord]:
    """Return up to ``limit`` matches (all when ``None``), newest first.

    Rows that cannot be decoded are logged and skipped; they do not count
    toward ``limit``.
    """

    try:
        rows = (await session.execute(select(Match).order_by(Match.id))).scalars()
    except SQLAlchemyError as exc:
        raise storage_unavailable(exc, "list matches")

    matches: list[MatchRecord] = []
    for row in rows:
        if limit is not None and len(matches) >= limit:
            break
        try:
            matches.append(MatchRecord.from_row(row))
        except MalformedRecord as exc:
            logger.warning("Skipping match: %s", exc)
    return matches


async def _get_row(session: AsyncSession, match_id: str) -> Match:
    try:
        row = await session.get(Match, match_id)
    except SQLAlchemyError as exc:
        raise storage_unavailable(exc, f"load match {match_id!r}")
    if row is None:
        raise MatchNotFound(match_id)
    return row


async def get_match(session: AsyncSession, match_id: str) -> MatchRecord:
    """Return one match; a row that cannot be decoded reads as missing."""

    row = await _get_row(session, match_id)
    try:
        return MatchRecord.from_row(row)
    except MalformedRecord as exc:
        logger.warning("Unreadable match: %s", exc)
        raise MatchNotFound(match_id)


async def delete_match(session: AsyncSession, match_id: str) -> None:
    row = await _get_row(session, match_id)
    try:
        await session.delete(row)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise storage_unavailable(exc, f"delete match {match_id!r}")
    logger.info("Deleted match %s", match_id)
