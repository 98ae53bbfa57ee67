from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..schemas import LeaderboardEntryOut, RivalryEntryOut
from ..services import build_leaderboard, build_rivalries
from ..services import match_log, roster

# Resource-only router; /leaderboard and /rivalries sit directly under the API prefix
router = APIRouter(tags=["leaderboards"])


# GET /api/leaderboard
@router.get("/leaderboard", response_model=list[LeaderboardEntryOut])
async def leaderboard(session: AsyncSession = Depends(get_session)):
    """Every roster player ranked by win rate, then games played, then id."""
    players = await roster.list_players(session)
    matches = await match_log.list_matches(session)
    return build_leaderboard(players, matches)


# GET /api/rivalries
@router.get("/rivalries", response_model=list[RivalryEntryOut])
async def rivalries(session: AsyncSession = Depends(get_session)):
    players = await roster.list_players(session)
    matches = await match_log.list_matches(session)
    return build_rivalries(players, matches)
