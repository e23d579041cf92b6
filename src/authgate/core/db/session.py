"""Database session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.authgate.core.db.engine import get_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the current engine.

    Used for work that must run outside the request's transaction, such as
    best-effort bookkeeping writes.
    """
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession]:
    """Get a database session.

    The session does NOT auto-commit; services own the transaction boundary.
    """
    async with AsyncSession(get_engine(), expire_on_commit=False) as session:
        yield session
