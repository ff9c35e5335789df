"""Test fixtures for the backend test suite."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mindshare.page_scraper import ScrapedRow
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.api.db.database import get_db
from backend.api.db.models import Base
from backend.api.dependencies import get_leaderboard_client, get_scheduler
from backend.api.main import app
from backend.api.services.scheduler import ScrapeScheduler
from backend.tests.support import (
    FakeLeaderboardClient,
    sqlite_engine,
    sqlite_session_factory,
)


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    """The session factory bound to the in-memory test database."""
    return sqlite_session_factory


@pytest.fixture(autouse=True)
def live_board() -> Generator[FakeLeaderboardClient, None, None]:
    """Override the live client dependency with an in-memory fake."""
    fake = FakeLeaderboardClient()
    app.dependency_overrides[get_leaderboard_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_leaderboard_client, None)


@pytest.fixture
def page_rows() -> list[ScrapedRow]:
    """Rows the fake page scraper returns; tests may append to the list."""
    return []


@pytest.fixture(autouse=True)
def scheduler(
    live_board: FakeLeaderboardClient, page_rows: list[ScrapedRow]
) -> Generator[ScrapeScheduler, None, None]:
    """Override the scheduler dependency with one wired to the test database."""

    async def _scrape(url: str) -> list[ScrapedRow]:
        return list(page_rows)

    sched = ScrapeScheduler(
        live_board,
        interval_s=3600,
        session_factory=sqlite_session_factory,
        page_scraper=_scrape,
    )
    app.dependency_overrides[get_scheduler] = lambda: sched
    yield sched
    app.dependency_overrides.pop(get_scheduler, None)


@pytest_asyncio.fixture(autouse=True)
async def _test_db() -> AsyncGenerator[None, None]:
    """Create tables in in-memory SQLite and override get_db for each test."""
    async with sqlite_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with sqlite_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    yield
    app.dependency_overrides.pop(get_db, None)

    async with sqlite_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Yield an async HTTP test client wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
