"""Immutable, request-scoped views of stored players and matches."""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

from ..exceptions import MalformedRecord
from ..models import DEFAULT_AVATAR, Match, Player
from ..schemas import MatchOut, PlayerOut
from ..time_utils import parse_rfc3339


class PlayerRecord(NamedTuple):
    id: str
    name: str
    nickname: str = ""
    avatar_emoji: str = DEFAULT_AVATAR

    @classmethod
    def from_row(cls, row: Player) -> "PlayerRecord":
        return cls(
            id=row.id,
            name=row.name,
            nickname=row.nickname or "",
            avatar_emoji=row.avatar_emoji or DEFAULT_AVATAR,
        )

    def to_out(self) -> PlayerOut:
        return PlayerOut(**self._asdict())


class MatchRecord(NamedTuple):
    id: str
    winner1_id: str
    winner2_id: str
    loser1_id: str
    loser2_id: str
    winner_score: int | None
    loser_score: int | None
    comment: str
    recorded_by: str
    played_at: datetime

    @property
    def winners(self) -> tuple[str, str]:
        return (self.winner1_id, self.winner2_id)

    @property
    def losers(self) -> tuple[str, str]:
        return (self.loser1_id, self.loser2_id)

    @classmethod
    def from_row(cls, row: Match) -> "MatchRecord":
        """Decode a stored row.

        Raises:
            MalformedRecord: if ``played_at`` is not a valid RFC 3339 timestamp.
        """
        try:
            played_at = parse_rfc3339(row.played_at)
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(row.id, f"invalid played_at {row.played_at!r}") from exc
        return cls(
            id=row.id,
            winner1_id=row.winner1_id,
            winner2_id=row.winner2_id,
            loser1_id=row.loser1_id,
            loser2_id=row.loser2_id,
            winner_score=row.winner_score,
            loser_score=row.loser_score,
            comment=row.comment or "",
            recorded_by=row.recorded_by,
            played_at=played_at,
        )

    def to_out(self) -> MatchOut:
        return MatchOut(**self._asdict())
