"""
Pytest fixtures for Unit Portal tests.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from unitportal.kernel.models.base import Base
from unitportal.kernel.models.personnel import Personnel, Role, nickname_key
from unitportal.kernel.identity.jwt import JWTManager


# In-memory SQLite; StaticPool keeps a single connection so every session sees the same data
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock handed to services."""

    def __init__(self, start: datetime = NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a fresh test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

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
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


async def make_personnel(
    session: AsyncSession,
    nickname: str,
    role: Role = Role.USER,
    rank: int = 0,
    rank_changed_at: Optional[datetime] = None,
    access_code: Optional[str] = None,
) -> Personnel:
    """Insert a directory record directly, bypassing the admin-only registration."""
    result = await session.execute(select(func.max(Personnel.roster_number)))
    number = (result.scalar() or 0) + 1
    changed = rank_changed_at or NOW
    record = Personnel(
        id=uuid.uuid4(),
        roster_number=number,
        access_code=access_code or f"CODE{number:06d}",
        nickname=nickname,
        nickname_key=nickname_key(nickname),
        rank=rank,
        rank_changed_at=changed,
        position="",
        position_changed_at=changed,
        role=role,
    )
    session.add(record)
    await session.commit()
    return record


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> Personnel:
    """Create a test admin."""
    return await make_personnel(db_session, "Командир", Role.ADMIN, rank=14)


@pytest_asyncio.fixture
async def moderator(db_session: AsyncSession) -> Personnel:
    """Create a test moderator."""
    return await make_personnel(db_session, "Сержант Петров", Role.MODERATOR, rank=4)


@pytest_asyncio.fixture
async def member(db_session: AsyncSession) -> Personnel:
    """Create a test rank-and-file member."""
    return await make_personnel(db_session, "Рядовой Иванов", Role.USER, rank=0)


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )
