# hoozin/db/session.py
import sys
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from hoozin.core.config import get_settings
from hoozin.db.base import Base

# Register ORM models on Base.metadata before create_all runs.
from hoozin.models import kv_entry  # noqa: F401

settings = get_settings()

# Detect if we're running under pytest
IS_TEST = "pytest" in sys.modules

engine = create_async_engine(
    settings.DB_URL,
    echo=False,
    # Tests drive the app from several event loops; never reuse connections
    # across them.
    poolclass=NullPool if IS_TEST else None,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async SQLAlchemy session.

    The session is automatically closed when the request is completed.
    """
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    """
    Create the key/value schema if it does not exist yet.

    Safe to call on every application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def reset_db() -> None:
    """
    TEST-ONLY: drop and recreate every table.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
