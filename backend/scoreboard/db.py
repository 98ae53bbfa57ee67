import logging
import os
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool, StaticPool


logger = logging.getLogger(__name__)

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[sessionmaker] = None
Base = declarative_base()


def get_database_url() -> str:
    """Return ``DATABASE_URL`` rewritten for an async driver.

    Plain ``postgresql://`` URLs are switched to ``asyncpg``. A ``RuntimeError``
    is raised when the variable is unset.
    """

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL environment variable is required")
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace(
            "postgresql://", "postgresql+asyncpg://", 1
        )
    return database_url


def get_engine() -> AsyncEngine:
    """Return a lazily created SQLAlchemy engine.

    The engine is created on first use using the ``DATABASE_URL`` environment
    variable. Importing this module has no side effects so tests can set the
    environment variable at runtime. A ``RuntimeError`` is raised only if the
    function is called without ``DATABASE_URL`` being configured.
    """

    global engine, AsyncSessionLocal

    if engine is None:
        database_url = get_database_url()
        engine_kwargs = {"echo": False}

        if database_url.startswith("sqlite+aiosqlite://"):
            # In-memory SQLite must reuse the same connection to persist schema/data.
            if ":memory:" in database_url:
                engine_kwargs["poolclass"] = StaticPool
            else:
                engine_kwargs["poolclass"] = NullPool
        else:
            engine_kwargs["pool_pre_ping"] = True

        engine = create_async_engine(database_url, **engine_kwargs)
        AsyncSessionLocal = sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    return engine


async def ensure_tables_exist() -> None:
    """Create any missing tables; existing tables and rows are left alone.

    Migrations under ``alembic/`` remain the source of truth for schema
    changes. This only bootstraps an empty database on startup.
    """

    from . import models  # noqa: F401  # register tables on Base.metadata

    async with get_engine().begin() as conn:
        existing = await conn.run_sync(
            lambda sync_conn: set(inspect(sync_conn).get_table_names())
        )
        await conn.run_sync(Base.metadata.create_all)
    for name in Base.metadata.tables:
        if name in existing:
            logger.debug("Table '%s' already exists", name)
        else:
            logger.info("Created table '%s'", name)


async def get_session() -> AsyncSession:
    """Provide a database session for FastAPI dependencies."""

    if AsyncSessionLocal is None:
        get_engine()

    assert AsyncSessionLocal is not None  # for type checkers
    async with AsyncSessionLocal() as session:
        yield session
