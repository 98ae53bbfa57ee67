"""Session-token validation.

The interactive sign-in happens elsewhere; whatever completes it issues an
HS256 session token signed with ``SESSION_SECRET`` (see
:func:`create_session_token`). This module turns that token, sent as the
``session`` cookie or an ``Authorization: Bearer`` header, into the caller's
identity for write endpoints.
"""

from datetime import datetime, timedelta
from typing import Any

import jwt
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from ..config import (
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_TTL_HOURS,
    get_session_secret,
    rate_limits_disabled,
)
from ..exceptions import http_problem
from ..schemas import AuthStatusOut, SessionUserOut
from ..time_utils import utcnow


JWT_ALG = "HS256"
COOKIE_PATH = "/"


def _get_client_ip(request: Request) -> str:
  forwarded = request.headers.get("X-Forwarded-For")
  if forwarded:
    parts = [ip.strip() for ip in forwarded.split(",") if ip.strip()]
    if parts:
      return parts[-1]
  real_ip = request.headers.get("X-Real-IP")
  if real_ip:
    return real_ip
  return request.client.host if request.client else ""


limiter = Limiter(key_func=_get_client_ip)
router = APIRouter(prefix="/auth", tags=["auth"])


def write_rate_limit() -> str:
  if rate_limits_disabled():
    return "1000/second"
  return "30/minute"


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
  detail = exc.detail if isinstance(exc.detail, str) else ""
  if detail:
    message = f"rate limit exceeded: {detail}"
  else:
    message = "rate limit exceeded: please wait before submitting another request."
  return JSONResponse(
      status_code=429,
      content={
          "detail": message,
          "code": "rate_limit_exceeded",
      },
  )


def create_session_token(
    user_id: str, name: str = "", email: str = "", *, now: datetime | None = None
) -> str:
  """Sign a session token for ``user_id`` valid for ``SESSION_TTL_HOURS``."""

  issued = now or utcnow()
  payload = {
      "sub": user_id,
      "name": name,
      "email": email,
      "iat": issued,
      "exp": issued + timedelta(hours=SESSION_TTL_HOURS),
  }
  return jwt.encode(payload, get_session_secret(), algorithm=JWT_ALG)


def decode_session_token(token: str) -> dict[str, Any]:
  try:
    payload = jwt.decode(token, get_session_secret(), algorithms=[JWT_ALG])
  except jwt.ExpiredSignatureError:
    raise http_problem(
        status_code=401,
        detail="session expired",
        code="auth_token_expired",
    )
  except jwt.PyJWTError:
    raise http_problem(
        status_code=401,
        detail="invalid session",
        code="auth_invalid_token",
    )
  if not isinstance(payload.get("sub"), str) or not payload["sub"]:
    raise http_problem(
        status_code=401,
        detail="invalid session",
        code="auth_invalid_token",
    )
  return payload


def _extract_token(request: Request, authorization: str | None) -> str | None:
  if authorization:
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
      return credentials.strip()
  cookie = request.cookies.get(SESSION_COOKIE_NAME)
  return cookie or None


def _user_from_payload(payload: dict[str, Any]) -> SessionUserOut:
  return SessionUserOut(
      id=payload["sub"],
      name=payload.get("name") or "",
      email=payload.get("email") or "",
  )


async def get_current_user(
    request: Request,
    authorization: str | None = Header(None),
) -> SessionUserOut:
  token = _extract_token(request, authorization)
  if not token:
    raise http_problem(
        status_code=401,
        detail="not authenticated",
        code="auth_not_authenticated",
    )
  return _user_from_payload(decode_session_token(token))


async def get_optional_user(
    request: Request,
    authorization: str | None = Header(None),
) -> SessionUserOut | None:
  token = _extract_token(request, authorization)
  if not token:
    return None
  try:
    return _user_from_payload(decode_session_token(token))
  except HTTPException:
    return None


@router.get("/me", response_model=AuthStatusOut)
async def read_me(current: SessionUserOut | None = Depends(get_optional_user)):
  if current is None:
    return AuthStatusOut(authenticated=False)
  return AuthStatusOut(authenticated=True, user=current)


@router.post("/logout")
async def logout():
  response = JSONResponse(content={"message": "Logged out"})
  response.delete_cookie(
      SESSION_COOKIE_NAME,
      path=COOKIE_PATH,
      secure=SESSION_COOKIE_SECURE,
      httponly=True,
      samesite="lax",
  )
  return response
