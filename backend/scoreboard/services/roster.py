"""Player store backed by the ``player`` table."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db_errors import is_unique_violation, storage_unavailable
from ..exceptions import PlayerAlreadyExists, PlayerNotFound
from ..models import Player
from .records import PlayerRecord

UPDATABLE_FIELDS = ("name", "nickname", "avatar_emoji")


async def list_players(session: AsyncSession) -> list[PlayerRecord]:
    try:
        rows = (await session.execute(select(Player).order_by(Player.id))).scalars().all()
    except SQLAlchemyError as exc:
        raise storage_unavailable(exc, "list players")
    return [PlayerRecord.from_row(p) for p in rows]


async def _get_row(session: AsyncSession, player_id: str) -> Player:
    try:
        row = await session.get(Player, player_id)
    except SQLAlchemyError as exc:
        raise storage_unavailable(exc, f"load player {player_id!r}")
    if row is None:
        raise PlayerNotFound(player_id)
    return row


async def get_player(session: AsyncSession, player_id: str) -> PlayerRecord:
    return PlayerRecord.from_row(await _get_row(session, player_id))


async def create_player(session: AsyncSession, player: PlayerRecord) -> PlayerRecord:
    try:
        exists = await session.get(Player, player.id)
    except SQLAlchemyError as exc:
        raise storage_unavailable(exc, f"load player {player.id!r}")
    if exists is not None:
        raise PlayerAlreadyExists(player.id)

    session.add(Player(**player._asdict()))
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        # Lost a race with a concurrent create of the same id.
        if is_unique_violation(exc):
            raise PlayerAlreadyExists(player.id)
        raise storage_unavailable(exc, f"create player {player.id!r}")
    return player


async def update_player(
    session: AsyncSession, player_id: str, changes: Mapping[str, Any]
) -> PlayerRecord:
    """Apply the non-``None`` values in ``changes``; other fields are kept."""

    row = await _get_row(session, player_id)
    for field in UPDATABLE_FIELDS:
        value = changes.get(field)
        if value is not None:
            setattr(row, field, value)
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise storage_unavailable(exc, f"update player {player_id!r}")
    return PlayerRecord.from_row(row)


async def delete_player(session: AsyncSession, player_id: str) -> None:
    """Remove the player. Matches referencing the id are left untouched."""

    row = await _get_row(session, player_id)
    try:
        await session.delete(row)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise storage_unavailable(exc, f"delete player {player_id!r}")
