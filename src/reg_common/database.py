import asyncio
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
    """Shared declarative base for all ORM models across modules."""

    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
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


class WriteGate:
    """Serializes mutating registry calls and makes each one all-or-nothing.

    Writers queue on one lock, so two mutating calls never interleave inside
    this process. The body commits on normal exit and rolls back on any
    exception; the exception is re-raised unchanged. Readers never touch
    the gate.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self, db: AsyncSession) -> AsyncIterator[AsyncSession]:
        async with self._lock:
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise


write_gate = WriteGate()
