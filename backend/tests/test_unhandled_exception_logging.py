import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from scoreboard.db import get_session
from scoreboard.db_errors import is_unique_violation
from scoreboard.main import app as main_app, unhandled_exception_handler


def test_unhandled_exception_logs_traceback(caplog):
    app = FastAPI()
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/boom")
    def boom():
        raise ValueError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    with caplog.at_level(logging.ERROR):
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["code"] == "internal_server_error"
    assert "boom" not in response.text
    record = next((r for r in caplog.records if r.message == "Unhandled exception"), None)
    assert record is not None
    assert record.exc_info[0] is ValueError
    assert "ValueError: boom" in caplog.text


class _UnreachableSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, ConnectionRefusedError("db-host:5432 refused"))

    async def get(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, ConnectionRefusedError("db-host:5432 refused"))


async def _unreachable_session():
    yield _UnreachableSession()


def test_storage_failure_is_opaque_503(caplog):
    main_app.dependency_overrides[get_session] = _unreachable_session
    try:
        with TestClient(main_app) as client, caplog.at_level(logging.ERROR):
            responses = [
                client.get("/api/players"),
                client.get("/api/leaderboard"),
                client.get("/api/matches/0_x"),
            ]
    finally:
        main_app.dependency_overrides.pop(get_session, None)

    for resp in responses:
        assert resp.status_code == 503
        assert resp.headers["content-type"].startswith("application/problem+json")
        body = resp.json()
        assert body["code"] == "storage_unavailable"
        assert "db-host" not in resp.text
    assert "Storage error while trying to list players" in caplog.text
    assert "db-host:5432 refused" in caplog.text


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/api/healthz").json() == {"status": "ok"}


def test_unique_violation_detection():
    dup = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: player.id"))
    other = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: player.name"))

    assert is_unique_violation(dup)
    assert not is_unique_violation(other)
    assert not is_unique_violation(OperationalError("SELECT", {}, Exception("unique constraint")))
