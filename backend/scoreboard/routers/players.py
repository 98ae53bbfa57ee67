from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import ProblemDetail
from ..schemas import (
    PlayerCreate,
    PlayerOut,
    PlayerStatsOut,
    PlayerUpdate,
    SessionUserOut,
)
from ..services import build_player_stats
from ..services import match_log, roster
from ..services.records import PlayerRecord
from .auth import get_current_user

router = APIRouter(
    prefix="/players",
    tags=["players"],
    responses={404: {"model": ProblemDetail}, 409: {"model": ProblemDetail}},
)


@router.get("", response_model=list[PlayerOut])
async def list_players(session: AsyncSession = Depends(get_session)):
    return [p.to_out() for p in await roster.list_players(session)]


@router.post("", response_model=PlayerOut, status_code=201)
async def create_player(
    body: PlayerCreate,
    session: AsyncSession = Depends(get_session),
    user: SessionUserOut = Depends(get_current_user),
):
    created = await roster.create_player(
        session,
        PlayerRecord(
            id=body.id,
            name=body.name,
            nickname=body.nickname,
            avatar_emoji=body.avatar_emoji,
        ),
    )
    return created.to_out()


@router.get("/{player_id}", response_model=PlayerOut)
async def get_player(player_id: str, session: AsyncSession = Depends(get_session)):
    return (await roster.get_player(session, player_id)).to_out()


@router.put("/{player_id}", response_model=PlayerOut)
@router.patch("/{player_id}", response_model=PlayerOut)
async def update_player(
    player_id: str,
    body: PlayerUpdate,
    session: AsyncSession = Depends(get_session),
    user: SessionUserOut = Depends(get_current_user),
):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    return (await roster.update_player(session, player_id, changes)).to_out()


@router.delete("/{player_id}", status_code=204)
async def delete_player(
    player_id: str,
    session: AsyncSession = Depends(get_session),
    user: SessionUserOut = Depends(get_current_user),
):
    await roster.delete_player(session, player_id)
    return Response(status_code=204)


@router.get("/{player_id}/stats", response_model=PlayerStatsOut)
async def player_stats(player_id: str, session: AsyncSession = Depends(get_session)):
    players = await roster.list_players(session)
    matches = await match_log.list_matches(session)
    return build_player_stats(player_id, players, matches)
