"""Pytest configuration and fixtures."""

import os

# Point settings at SQLite before crypto_journal builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TIMEZONE", "UTC")

from collections.abc import AsyncGenerator, Generator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from crypto_journal import models  # noqa: F401
from crypto_journal.core.clock import get_now
from crypto_journal.core.database import Base, get_db
from crypto_journal.main import app

# Wednesday afternoon; relative periods in tests resolve against this
FIXED_NOW = datetime(2026, 3, 18, 15, 30, tzinfo=UTC)

_trade_ids = count(1)


def make_trade(**overrides) -> dict:
    """Closed BTC long as a raw engine row; override any field."""
    trade = {
        "id": f"t{next(_trade_ids)}",
        "asset_pair": "BTC/USDT",
        "trade_type": "long",
        "entry_price": Decimal("100"),
        "exit_price": Decimal("110"),
        "quantity": Decimal("1"),
        "fees": Decimal("0"),
        "pnl": Decimal("10"),
        "strategy_tag": None,
        "exchange": None,
        "status": "closed",
        "trade_date": datetime(2026, 3, 10, 12, 0, tzinfo=UTC),
    }
    trade.update(overrides)
    return trade


@pytest.fixture
def now() -> datetime:
    """Reference time for relative periods."""
    return FIXED_NOW


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh in-memory database session for each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture(scope="function")
def client(tmp_path) -> Generator[TestClient, None, None]:
    """Create a test client backed by a throwaway SQLite file.

    Tables are created inside the client's own event loop and the clock
    is pinned to FIXED_NOW.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'journal.db'}",
        poolclass=NullPool,
    )
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def test_lifespan(app):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        yield
        await engine.dispose()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    original_lifespan = app.router.lifespan_context
    app.router.lifespan_context = test_lifespan
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW

    with TestClient(app) as test_client:
        yield test_client

    app.router.lifespan_context = original_lifespan
    app.dependency_overrides.clear()
