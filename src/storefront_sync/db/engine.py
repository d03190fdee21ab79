"""Async engine, session factory and schema bootstrap."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.ext.asyncio import (
    create_async_engine as _sa_create_async_engine,
)
from sqlalchemy.pool import StaticPool

from storefront_sync.db.models import Base


def create_async_engine(database_url: str) -> AsyncEngine:
    """Build an :class:`AsyncEngine` for ``postgresql+asyncpg`` or ``sqlite+aiosqlite``.

    In-memory SQLite URLs share one connection so every session sees the
    same database.
    """
    kwargs: dict[str, object] = {}

    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url.endswith("://") or ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool

    return _sa_create_async_engine(database_url, **kwargs)


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to *engine* with ``expire_on_commit=False``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create every table declared on :class:`Base`."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps read back from SQLite."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
