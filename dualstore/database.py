"""
DualStore API - Relational Connection Management
=================================================

What:  Async SQLAlchemy engine, session factory, and schema bootstrap.
How:   One async engine (asyncpg driver) with a connection pool is created
       per application and shared by all requests. The relational store
       adapter receives a session factory bound to it and opens a short
       session per operation.
Who:   Used by the bootstrap in main.py and by PostgresResourceStore.
When:  Engine is created when the app is built; it connects lazily on the
       first statement (ensure_schema during startup).

Connection Pooling:
    pool_size / max_overflow come from settings.
    pool_pre_ping validates connections before use (catches stale
    connections after a database restart).
"""

import logging

from sqlalchemy import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from dualstore.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which ensure_schema() uses to create
    missing tables.
    """
    pass


# ── Engine / Session Factories ────────────────────────────────────────────
def create_engine(app_settings: Settings) -> AsyncEngine:
    """
    Build the shared async engine for the relational backend.

    No connection is opened here. Pool options are only passed for
    PostgreSQL URLs, since SQLite test engines use a different pool class.
    """
    url = make_url(app_settings.database_url)
    options = {"echo": app_settings.log_level == "DEBUG"}
    if url.get_backend_name() == "postgresql":
        options.update(
            pool_size=app_settings.db_pool_size,
            max_overflow=app_settings.db_max_overflow,
            pool_pre_ping=app_settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Creates AsyncSession instances bound to `engine`.

    expire_on_commit=False keeps ORM attributes readable after commit,
    outside the session context.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ensure_schema(engine: AsyncEngine) -> None:
    """
    Idempotently create the `resources` table.

    What:  Runs CREATE TABLE for every model table that does not exist yet
           (checkfirst), inside one transaction.
    When:  Application startup. A failure here is fatal to startup.
    """
    # Register the model with Base.metadata
    from dualstore.models.resource import Resource  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Relational schema ready (table 'resources')")


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
    logger.info("PostgreSQL engine disposed")
