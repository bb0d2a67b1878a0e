"""Integration test conftest - a real PostgreSQL ledger.

Runs only when TEST_DATABASE_URL points at a disposable database. Tables are
created fresh for each test and dropped afterwards, because the concurrency
tests need committed rows visible across separate sessions.
"""

import os

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import gains_api.models  # noqa: F401  (registers tables on SQLModel.metadata)

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "")


@pytest.fixture(autouse=True)
def _mark_integration(request):
    """Auto-mark all tests in this directory as integration."""
    request.node.add_marker(pytest.mark.integration)


@pytest.fixture
async def ledger_engine():
    if not TEST_DATABASE_URL:
        pytest.skip("TEST_DATABASE_URL not set")

    engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(ledger_engine):
    return async_sessionmaker(ledger_engine, expire_on_commit=False)
