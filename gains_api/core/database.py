from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from gains_api.config import settings
from gains_api.core.exceptions import DatabaseUnavailableError


def build_engine(database_url: str) -> AsyncEngine | None:
    """Create the pooled async engine, or None when no database is configured."""
    if not database_url:
        return None
    return create_async_engine(
        database_url,
        echo=False,
        future=True,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,  # Detects stale connections before use
        pool_recycle=300,
        pool_timeout=30,
    )


engine = build_engine(settings.database_url)

async_session_maker = (
    sessionmaker(  # type: ignore[call-overload]
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    if engine is not None
    else None
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an async database session.

    Raises DatabaseUnavailableError when the ledger is not configured, so
    every data-accessing endpoint fails fast instead of assuming a store.
    """
    if async_session_maker is None:
        raise DatabaseUnavailableError()

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_optional_db() -> AsyncGenerator[AsyncSession | None, None]:
    """Dependency that yields a session, or None when the ledger is not configured.

    Used by the RevenueCat webhook, which must acknowledge non-purchase events
    even without a database and only needs the store when it records a purchase.
    """
    if async_session_maker is None:
        yield None
        return

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables (for development only - use Alembic in production)."""
    if engine is None:
        return
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine's connection pool on shutdown."""
    if engine is not None:
        await engine.dispose()
