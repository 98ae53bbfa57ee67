from sqlalchemy import Column, Integer, String, Text

from .db import Base

DEFAULT_AVATAR = "🏓"


class Player(Base):
    __tablename__ = "player"
    id = Column(String(64), primary_key=True)  # externally chosen slug, e.g. "alice"
    name = Column(String(100), nullable=False)
    nickname = Column(String(100), nullable=False, default="")
    avatar_emoji = Column(String(32), nullable=False, default=DEFAULT_AVATAR)


class Match(Base):
    """One completed doubles game.

    ``id`` is the ordered log key, so ``ORDER BY id`` yields newest first.
    Participant ids are plain strings, not foreign keys: a match stays valid
    after any of its players is deleted.
    """

    __tablename__ = "match"
    id = Column(String(64), primary_key=True)
    winner1_id = Column(String(64), nullable=False)
    winner2_id = Column(String(64), nullable=False)
    loser1_id = Column(String(64), nullable=False)
    loser2_id = Column(String(64), nullable=False)
    winner_score = Column(Integer, nullable=True)
    loser_score = Column(Integer, nullable=True)
    comment = Column(Text, nullable=False, default="")
    recorded_by = Column(String, nullable=False)
    # RFC 3339 text; decoded on read so a bad value only drops that row.
    played_at = Column(String(40), nullable=False)
