"""Pytest fixtures for testing."""

import os
import tempfile
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

_TEST_DB_PATH = Path(tempfile.gettempdir()) / "pagecomments_test.db"

os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_DB_PATH}")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")

from pagecomments.core.database import get_db
from pagecomments.main import app
from pagecomments.models.base import Base
from pagecomments.models.form_session import FormSession
from pagecomments.models.page import Page
from pagecomments.models.page_comment import PageComment

TEST_DATABASE_URL = os.environ["DATABASE_URL"]

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=NullPool,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


@pytest_asyncio.fixture(scope="function")
async def db() -> AsyncGenerator[AsyncSession, None]:
    """Create test database session.

    Creates all tables before each test and drops them after. Drops first as
    well in case a previous run crashed mid-test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Test client sharing the test database session with the app."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Token": os.environ["ADMIN_TOKEN"]}


async def create_page(
    db: AsyncSession,
    url_segment: str = "about-us",
    title: str = "About Us",
    content: str = "Who we are.",
) -> Page:
    page = Page(url_segment=url_segment, title=title, content=content)
    db.add(page)
    await db.flush()
    await db.refresh(page)
    return page


async def create_comment(
    db: AsyncSession,
    page: Page,
    comment: str,
    name: str = "Existing Author",
    email: str = "existing@example.org",
) -> PageComment:
    item = PageComment(page_id=page.id, name=name, email=email, comment=comment)
    db.add(item)
    await db.flush()
    await db.refresh(item)
    return item


@pytest_asyncio.fixture
async def test_page(db: AsyncSession) -> Page:
    page = await create_page(db)
    await db.commit()
    return page


@pytest_asyncio.fixture
async def other_page(db: AsyncSession) -> Page:
    page = await create_page(db, url_segment="news", title="News", content="Latest news.")
    await db.commit()
    return page


@pytest_asyncio.fixture
async def form_session(db: AsyncSession) -> FormSession:
    session = FormSession(
        token="test-session-token",
        expires_at=datetime.now(UTC) + timedelta(hours=1),
    )
    db.add(session)
    await db.flush()
    await db.commit()
    return session
