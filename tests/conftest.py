"""
Pytest fixtures for lesson activity tests.

Every test gets a fresh in-memory SQLite database with foreign keys on,
so payload cascades and direction SET NULL behave as in production.
"""

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lesson_activities.composition.activity_list import ActivityListManager
from lesson_activities.composition.payload_editor import PayloadEditor
from lesson_activities.database import get_db
from lesson_activities.kernel.models import Base, LessonPlanDirection
from lesson_activities.kernel.store import RecordStore


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(db_session: AsyncSession) -> RecordStore:
    return RecordStore(db_session)


@pytest.fixture
def manager(db_session: AsyncSession) -> ActivityListManager:
    return ActivityListManager(db_session)


@pytest.fixture
def editor(db_session: AsyncSession) -> PayloadEditor:
    return PayloadEditor(db_session)


@pytest.fixture
def lesson_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest_asyncio.fixture
async def add_direction(db_session: AsyncSession):
    """Factory for lesson plan directions pointing at an activity."""

    async def _add(activity_id: uuid.UUID, content: str = "Read aloud", order: int = 0):
        direction = LessonPlanDirection(
            lesson_plan_id=uuid.uuid4(),
            activity_id=activity_id,
            content=content,
            direction_order=order,
        )
        db_session.add(direction)
        await db_session.flush()
        return direction

    return _add


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test session injected."""
    from lesson_activities.main import app

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
