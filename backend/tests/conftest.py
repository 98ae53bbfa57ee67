import os
import sys
import asyncio

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# A sufficiently long session secret for tests
TEST_SESSION_SECRET = "s" * 40
os.environ.setdefault("SESSION_SECRET", TEST_SESSION_SECRET)
os.environ.setdefault("DISABLE_RATE_LIMITS", "true")
os.environ.setdefault("ALLOWED_ORIGINS", "")
# Honour any externally provided DATABASE_URL (e.g. CI may set a file-backed DB)
# but fall back to an in-memory SQLite database so local runs remain isolated.
DEFAULT_DB_URL = os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Register the models with the declarative Base before any create_all.
from scoreboard import db, models  # noqa: E402,F401
from scoreboard.routers.auth import create_session_token  # noqa: E402


@pytest.fixture(scope="session")
def session_loop():
    """Single event loop for all sync fixtures that need to run async DB code."""

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


@pytest.fixture(autouse=True)
def session_secret(monkeypatch):
    """Ensure a strong session secret is present for all tests."""
    monkeypatch.setenv("SESSION_SECRET", TEST_SESSION_SECRET)
    yield


@pytest.fixture(autouse=True, scope="session")
def ensure_database(session_loop):
    """Ensure the test database starts clean and honours DATABASE_URL."""

    mp = pytest.MonkeyPatch()
    desired_url = os.getenv("DATABASE_URL") or DEFAULT_DB_URL
    mp.setenv("DATABASE_URL", desired_url)

    if desired_url.startswith("sqlite") and ":memory:" not in desired_url:
        path = desired_url.split("///")[-1]
        if os.path.exists(path):
            os.remove(path)

    db.engine = None
    db.AsyncSessionLocal = None
    yield
    if db.engine is not None:
        session_loop.run_until_complete(db.engine.dispose())
        db.engine = None
    db.AsyncSessionLocal = None
    mp.undo()


async def _reset_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(db.Base.metadata.drop_all)
        await conn.run_sync(db.Base.metadata.create_all)


@pytest.fixture(autouse=True)
def reset_schema(request, session_loop):
    """Reset the schema before each test unless preserved via marker."""

    if request.node.get_closest_marker("preserve_schema"):
        yield
        return

    engine = db.engine or db.get_engine()
    session_loop.run_until_complete(_reset_schema(engine))
    yield


@pytest.fixture
def run_db(session_loop):
    """Run ``fn(session)`` against the test database and return its result."""

    def _run(fn):
        async def _inner():
            db.get_engine()
            async with db.AsyncSessionLocal() as s:
                return await fn(s)

        return session_loop.run_until_complete(_inner())

    return _run


def auth_headers(user_id: str = "organizer", name: str = "Organizer") -> dict[str, str]:
    token = create_session_token(user_id, name=name, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from scoreboard.main import app
    from scoreboard.routers.auth import limiter

    limiter.reset()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def headers():
    return auth_headers()
