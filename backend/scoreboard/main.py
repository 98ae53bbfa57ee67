from contextlib import asynccontextmanager
from pathlib import Path
import logging
import os

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from .routers import auth, leaderboards, matches, players
from .config import API_PREFIX, get_session_secret
from .db import ensure_tables_exist
from .exceptions import DomainException, ProblemDetail
from .utils.sentry import init_sentry

logging.basicConfig(
    level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

init_sentry()

# -----------------------------------------------------------------------------
# CORS configuration
# -----------------------------------------------------------------------------
# The built frontend is normally served by this app itself, so cross-origin
# access is opt-in.
allowed_origins_raw = os.getenv("ALLOWED_ORIGINS", "").strip()
ALLOWED_ORIGINS = [o.strip() for o in allowed_origins_raw.split(",") if o.strip()]
ALLOW_CREDENTIALS = os.getenv("ALLOW_CREDENTIALS", "true").lower() == "true"

# Fail fast if misconfigured: credentials + wildcard origins is unsafe
if "*" in ALLOWED_ORIGINS:
    raise ValueError(
        "ALLOWED_ORIGINS cannot include '*' (wildcard). Specify explicit, trusted origins."
    )

# Fail fast if SESSION_SECRET is missing or weak
get_session_secret()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_tables_exist()
    yield


# -----------------------------------------------------------------------------
# FastAPI app
# -----------------------------------------------------------------------------
app = FastAPI(
    title="Scoreboard API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = auth.limiter
app.add_exception_handler(RateLimitExceeded, auth.rate_limit_handler)

if ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

logger.info("API_PREFIX=%r", API_PREFIX)


# -----------------------------------------------------------------------------
# Health checks
# -----------------------------------------------------------------------------
@app.get("/healthz", tags=["health"])  # Unprefixed for reverse proxy / uptime checks
def root_healthz():
    return {"status": "ok"}


# -----------------------------------------------------------------------------
# Error handling
# -----------------------------------------------------------------------------
def _problem_response(problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(),
        media_type="application/problem+json",
    )


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.code)
    return _problem_response(
        ProblemDetail(
            type=exc.type,
            title=exc.title,
            detail=exc.detail,
            status=exc.status_code,
            code=exc.code,
        )
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    code = getattr(exc, "code", f"http_{exc.status_code}")
    response = _problem_response(
        ProblemDetail(
            title=detail,
            detail=detail,
            status=exc.status_code,
            code=code,
        )
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return _problem_response(
        ProblemDetail(
            title="Validation error",
            detail="; ".join(messages) or None,
            status=422,
            code="validation_error",
        )
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", exc_info=(type(exc), exc, exc.__traceback__))
    return _problem_response(
        ProblemDetail(
            title="Internal Server Error",
            status=500,
            detail="internal server error",
            code="internal_server_error",
        )
    )

# -----------------------------------------------------------------------------
# Routers
# -----------------------------------------------------------------------------
api_router = APIRouter(prefix=API_PREFIX, tags=["meta"])


@api_router.get("/healthz", tags=["health"])
def api_healthz():
    return {"status": "ok"}


api_router.include_router(auth.router)
api_router.include_router(players.router)
api_router.include_router(matches.router)
api_router.include_router(leaderboards.router)
app.include_router(api_router)

# -----------------------------------------------------------------------------
# Static frontend
# -----------------------------------------------------------------------------
# Mounted last so API routes win; html=True serves index.html for "/".
STATIC_DIR = os.getenv("STATIC_DIR")
if STATIC_DIR and Path(STATIC_DIR).is_dir():
    logger.info("Serving frontend from %s", STATIC_DIR)
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="frontend")
elif STATIC_DIR:
    logger.warning("STATIC_DIR %s does not exist; frontend not mounted", STATIC_DIR)
