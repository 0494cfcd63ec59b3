"""
Database connection and session management.
Uses SQLAlchemy 2.0 async pattern.

The default database is in-memory SQLite; state lives as long as the process.
"""

from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from unitportal.config import get_settings

settings = get_settings()

# Determine engine options based on database type
is_sqlite = settings.database_url.startswith("sqlite")

if is_sqlite:
    # In-memory SQLite only exists per connection, so every session shares one
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        """Enable foreign keys on every new SQLite connection."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    # PostgreSQL settings with connection pooling
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=True,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that yields database sessions.

    One request is one transaction: commit on success, rollback on any error.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Initialize database tables and load sample data when enabled."""
    # Import Base from kernel models to ensure all models are registered
    from unitportal.kernel.models import Base
    from unitportal.seed import seed_sample_data

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_sample_data:
        async with async_session_maker() as session:
            await seed_sample_data(session)
            await session.commit()


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
