"""Base database configuration and mixins."""

import uuid
from typing import AsyncGenerator

from sqlalchemy import Column, DateTime, Uuid, func, create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from casetrack.config import get_settings

settings = get_settings()


def _engine_args(url: str, pool_size: int, max_overflow: int) -> dict:
    # SQLite (local dev and tests) does not take pool sizing arguments.
    if url.startswith("sqlite"):
        return {"echo": settings.debug}
    return {
        "echo": settings.debug,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": 30,
    }


# Async engine for FastAPI
engine = create_async_engine(
    settings.database_url,
    **_engine_args(settings.database_url, pool_size=10, max_overflow=20),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Sync engine for Celery tasks
sync_database_url = (
    settings.database_url
    .replace("postgresql+asyncpg://", "postgresql://")
    .replace("sqlite+aiosqlite://", "sqlite://")
)
sync_engine = create_engine(
    sync_database_url,
    **_engine_args(sync_database_url, pool_size=5, max_overflow=10),
)

SyncSessionLocal = sessionmaker(
    bind=sync_engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class UUIDMixin:
    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
