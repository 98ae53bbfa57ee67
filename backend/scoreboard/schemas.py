from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator, field_validator, ConfigDict

from .models import DEFAULT_AVATAR
from .time_utils import require_utc

MAX_COMMENT_LENGTH = 500


def _trimmed(value: str, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{field_name} must not be empty")
    return trimmed


class PlayerCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=100)
    nickname: str = Field(default="", max_length=100)
    avatar_emoji: str = Field(default=DEFAULT_AVATAR, min_length=1, max_length=32)

    model_config = ConfigDict(extra="forbid")

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, value: str) -> str:
        trimmed = _trimmed(value, "id")
        if any(ch.isspace() for ch in trimmed):
            raise ValueError("id must not contain whitespace")
        return trimmed

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _trimmed(value, "name")

    @field_validator("nickname", mode="before")
    @classmethod
    def _normalize_nickname(cls, value: Optional[str]) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise TypeError("nickname must be a string")
        return value.strip()


class PlayerUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    nickname: Optional[str] = Field(default=None, max_length=100)
    avatar_emoji: Optional[str] = Field(default=None, min_length=1, max_length=32)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _trimmed(value, "name")

    @field_validator("nickname", mode="before")
    @classmethod
    def _normalize_nickname(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeError("nickname must be a string")
        return value.strip()


class PlayerOut(BaseModel):
    id: str
    name: str
    nickname: str = ""
    avatar_emoji: str = DEFAULT_AVATAR


class MatchCreate(BaseModel):
    winner1_id: str = Field(..., min_length=1, max_length=64)
    winner2_id: str = Field(..., min_length=1, max_length=64)
    loser1_id: str = Field(..., min_length=1, max_length=64)
    loser2_id: str = Field(..., min_length=1, max_length=64)
    winner_score: Optional[int] = Field(default=None, ge=0)
    loser_score: Optional[int] = Field(default=None, ge=0)
    comment: str = Field(default="", max_length=MAX_COMMENT_LENGTH)
    played_at: Optional[datetime] = None

    @field_validator(
        "winner1_id", "winner2_id", "loser1_id", "loser2_id", mode="before"
    )
    @classmethod
    def _validate_participant(cls, value: str) -> str:
        return _trimmed(value, "player id")

    @field_validator("comment", mode="before")
    @classmethod
    def _normalize_comment(cls, value: Optional[str]) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise TypeError("comment must be a string")
        return value.strip()

    @field_validator("played_at")
    @classmethod
    def _normalize_played_at(cls, v: datetime | None) -> datetime | None:
        return require_utc(v, field_name="played_at")

    @model_validator(mode="after")
    def _distinct_participants(self) -> "MatchCreate":
        ids = [self.winner1_id, self.winner2_id, self.loser1_id, self.loser2_id]
        if len(set(ids)) != len(ids):
            raise ValueError("a player can only appear once in a match")
        return self


class MatchOut(BaseModel):
    id: str
    winner1_id: str
    winner2_id: str
    loser1_id: str
    loser2_id: str
    winner_score: Optional[int] = None
    loser_score: Optional[int] = None
    comment: str = ""
    recorded_by: str
    played_at: datetime


class LeaderboardEntryOut(BaseModel):
    player_id: str
    player_name: str
    avatar_emoji: str
    nickname: str
    wins: int
    losses: int
    total_games: int
    win_rate: float
    streak: int


class PartnerStatsOut(BaseModel):
    """Record of a player together with one teammate."""

    partner_id: str
    partner_name: str
    wins: int
    losses: int


class RivalryStatsOut(BaseModel):
    """Record of a player against one opponent."""

    opponent_id: str
    opponent_name: str
    wins_against: int
    losses_against: int


class RivalryEntryOut(BaseModel):
    """Head-to-head record for a canonical pair (``player1_id < player2_id``)."""

    player1_id: str
    player1_name: str
    player2_id: str
    player2_name: str
    player1_wins: int
    player2_wins: int


class PlayerStatsOut(BaseModel):
    """Statistics summary returned by the player stats endpoint."""

    player_id: str
    player_name: str
    avatar_emoji: str
    nickname: str
    wins: int = 0
    losses: int = 0
    total_games: int = 0
    win_rate: float = 0.0
    streak: int = 0
    best_partner: Optional[PartnerStatsOut] = None
    nemesis: Optional[RivalryStatsOut] = None
    recent_matches: List[MatchOut] = Field(default_factory=list)


class SessionUserOut(BaseModel):
    """Identity carried by a validated session token."""

    id: str
    name: str = ""
    email: str = ""


class AuthStatusOut(BaseModel):
    authenticated: bool
    user: Optional[SessionUserOut] = None
