import contextlib
import sys
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from src.config.settings import settings


def create_engine(url: str) -> AsyncEngine:
    url = str(url)
    connect_args = {"timeout": 15} if url.startswith("sqlite") else {}
    return create_async_engine(url, echo=settings.log_db, connect_args=connect_args)


def _test_database_url(url: str) -> str:
    """Point a database URL at the `test_` sibling of its database."""
    prefix, db_name = str(url).rsplit("/", 1)
    return f"{prefix}/test_{db_name}"


# never point a test run at the real database
engine = create_engine(_test_database_url(settings.database_url) if "pytest" in sys.modules else settings.database_url)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


def create_migration_engine() -> AsyncEngine:
    """Unpooled engine on the app's database for alembic runs.

    Alembic runs in its own event loop, and an asyncpg connection is bound to
    the loop that opened it, so no migration connection may enter the app pool.
    """
    return create_async_engine(engine.url, poolclass=NullPool)


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit: bool = True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    """Yield a session that commits on success and rolls back on error.

    A `session_overwrite` is yielded as is and left to its owner, which lets
    tests run every store against one transaction.
    """
    if session_overwrite is not None:
        yield session_overwrite
        return

    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        if auto_commit:
            await session.commit()
