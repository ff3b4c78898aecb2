"""Async engine, per-request sessions and the unit-of-work boundary.

One AsyncSession per HTTP request. Services group their writes in
`unit_of_work(db)`; repositories never commit.
"""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base; only UserModel is mapped, everything else is raw SQL."""


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit everything written inside the block, or roll all of it back.

    Row locks taken inside the block (SELECT ... FOR UPDATE, conditional
    UPDATE) are held until the commit/rollback here.
    """
    try:
        yield db
        await db.commit()
    except BaseException:
        await db.rollback()
        raise
