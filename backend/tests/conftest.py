"""Pytest configuration and fixtures."""

import os

# Must be set before knowledge_base.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "console")

from collections.abc import AsyncGenerator
from typing import Any
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from knowledge_base.core.base_model import Base
from knowledge_base.core.database import enable_sqlite_foreign_keys, get_db, init_db
from knowledge_base.main import create_app
from knowledge_base.modules.faqs.models import FAQ, Topic, User

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[Any, None]:
    """Create test database engine with a fresh schema.

    In-memory SQLite by default; set TEST_DATABASE_URL to run against PostgreSQL.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_foreign_keys(engine)
    else:
        engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    await init_db(bind=engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: Any) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def app(db_session: AsyncSession) -> FastAPI:
    """Create test FastAPI application."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    application.dependency_overrides[get_db] = override_get_db

    return application


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ============================================================================
# Test Data Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_author(db_session: AsyncSession) -> User:
    """Create a test author."""
    unique_id = uuid4()
    user = User(
        id=unique_id,
        email=f"author-{unique_id.hex[:8]}@example.com",
        name="Test Author",
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest_asyncio.fixture(scope="function")
async def test_faq(db_session: AsyncSession, test_author: User) -> FAQ:
    """Create a bare FAQ without dependents."""
    faq = FAQ(
        title="How do I reset my password?",
        summary="Password recovery",
        content="Open the login page and follow the reset link.",
        author_id=test_author.id,
    )
    db_session.add(faq)
    await db_session.commit()
    return faq


@pytest_asyncio.fixture(scope="function")
async def test_topic(db_session: AsyncSession) -> Topic:
    """Create a test topic."""
    topic = Topic(name="Security")
    db_session.add(topic)
    await db_session.flush()
    return topic


@pytest.fixture
def random_uuid() -> UUID:
    """Generate random UUID."""
    return uuid4()
