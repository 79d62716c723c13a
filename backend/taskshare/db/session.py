"""Standalone Sessions — engines and schema bootstrap outside the FastAPI lifecycle.

Used by scripts and by tests that need real, separate connections (a file-backed
SQLite database) rather than the request-scoped db_manager.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

from taskshare.db.base import Base
import taskshare.models  # noqa: F401


def create_session_factory(
    database_url: str,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory for the given database URL."""
    connect_args = {"timeout": 5} if database_url.startswith("sqlite") else {}
    engine = create_async_engine(database_url, echo=False, connect_args=connect_args)
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create every table on an empty database (dev/test only; production uses alembic)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
