"""
Database engine and per-request sessions (SQLAlchemy 2.0 async).

One request is one unit of work: get_db commits when the route returns and
rolls back when it raises, so a failed activity operation never leaves a
half-written lesson behind.
"""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from lesson_activities.config import get_settings

settings = get_settings()


def _create_engine(url: str, echo: bool = False) -> AsyncEngine:
    if not url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
        )

    # NullPool: every session gets its own connection
    sqlite_engine = create_async_engine(
        url,
        echo=echo,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )

    @event.listens_for(sqlite_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        """WAL, and foreign keys so payload rows cascade with their activity."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    return sqlite_engine


engine = _create_engine(settings.database_url, echo=settings.debug)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session; commit on success, roll back on any exception."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables. Production schemas come from alembic."""
    from lesson_activities.kernel.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
