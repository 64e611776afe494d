"""Async SQLAlchemy engine and session factory for the event journal.

Uses psycopg3 which supports both sync and async with the same
``postgresql+psycopg://`` URL.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def create_engine(database_url: str, **kwargs: object) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    The journal sees one short insert per committed call plus occasional
    list queries, so a small pool is plenty:

    - **pool_size=3** with **max_overflow=5** for bursts of readers.
    - **pool_pre_ping=True** to survive PG restarts and idle disconnects.
    - **pool_recycle=3600** to avoid stale TCP behind load-balancers.

    All defaults can be overridden via *kwargs*.
    """
    defaults = {
        "echo": False,
        "pool_size": 3,
        "max_overflow": 5,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }
    defaults.update(kwargs)  # type: ignore[arg-type]
    return create_async_engine(database_url, **defaults)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to *engine*.

    ``expire_on_commit=False`` keeps rows readable after commit without
    implicit IO.
    """
    return async_sessionmaker(engine, expire_on_commit=False)
