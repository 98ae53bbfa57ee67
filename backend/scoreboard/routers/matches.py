from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import ProblemDetail
from ..schemas import MatchCreate, MatchOut, SessionUserOut
from ..services import match_log
from .auth import get_current_user, limiter, write_rate_limit

# Resource-only prefix; the API prefix is added in main.py
router = APIRouter(
    prefix="/matches",
    tags=["matches"],
    responses={404: {"model": ProblemDetail}},
)


# GET /api/matches?limit=20
@router.get("", response_model=list[MatchOut])
async def list_matches(
    limit: int | None = Query(None, ge=1),
    session: AsyncSession = Depends(get_session),
):
    return [m.to_out() for m in await match_log.list_matches(session, limit)]


# POST /api/matches
@router.post("", response_model=MatchOut, status_code=201)
@limiter.limit(write_rate_limit)
async def create_match(
    request: Request,
    body: MatchCreate,
    session: AsyncSession = Depends(get_session),
    user: SessionUserOut = Depends(get_current_user),
):
    record = match_log.new_match_record(body, recorded_by=user.id)
    return (await match_log.append_match(session, record)).to_out()


@router.get("/{match_id}", response_model=MatchOut)
async def get_match(match_id: str, session: AsyncSession = Depends(get_session)):
    return (await match_log.get_match(session, match_id)).to_out()


@router.delete("/{match_id}", status_code=204)
async def delete_match(
    match_id: str,
    session: AsyncSession = Depends(get_session),
    user: SessionUserOut = Depends(get_current_user),
):
    await match_log.delete_match(session, match_id)
    return Response(status_code=204)
