"""
Pytest fixtures for ResourceHub gamification tests.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")

import models  # noqa: E402,F401
from core.security import create_access_token  # noqa: E402
from db.base import Base  # noqa: E402
from db.session import get_db  # noqa: E402
from models.contribution import Contribution  # noqa: E402
from models.resource import Collection, Resource  # noqa: E402
from models.user import User  # noqa: E402
from repositories.provider import Repositories  # noqa: E402
from services.cache_service import leaderboard_cache  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture(autouse=True)
def clear_leaderboard_cache() -> None:
    """Leaderboards are cached process-wide; start every test empty."""
    leaderboard_cache.clear()


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the schema created for one test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repos(db_session: AsyncSession) -> Repositories:
    return Repositories.from_session(db_session)


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Create mock database session."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    return session


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory inserting a user; keyword arguments override the defaults."""
    counter = {"n": 0}

    async def _make(**kwargs: Any) -> User:
        counter["n"] += 1
        values: dict[str, Any] = {
            "email": f"student{counter['n']}@example.com",
            "full_name": f"Student {counter['n']}",
            "department": "Computer Science",
            "semester": 3,
            "points": 0,
            "is_active": True,
        }
        values.update(kwargs)
        user = User(**values)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_resource(db_session: AsyncSession) -> Callable[..., Awaitable[Resource]]:
    async def _make(owner: User, **kwargs: Any) -> Resource:
        values: dict[str, Any] = {
            "title": "Lecture notes",
            "resource_type": "document",
            "department": owner.department,
            "uploaded_by": owner.id,
        }
        values.update(kwargs)
        resource = Resource(**values)
        db_session.add(resource)
        await db_session.commit()
        return resource

    return _make


@pytest.fixture
def make_collection(db_session: AsyncSession) -> Callable[..., Awaitable[Collection]]:
    async def _make(owner: User, **kwargs: Any) -> Collection:
        collection = Collection(title=kwargs.pop("title", "Exam prep"), created_by=owner.id, **kwargs)
        db_session.add(collection)
        await db_session.commit()
        return collection

    return _make


@pytest.fixture
def make_contribution(db_session: AsyncSession) -> Callable[..., Awaitable[Contribution]]:
    """Factory inserting a contribution `days_ago` days in the past."""

    async def _make(user: User, type: str = "upload", points_earned: int = 10, days_ago: float = 0) -> Contribution:
        contribution = Contribution(
            user_id=user.id,
            type=type,
            points_earned=points_earned,
            extra={},
            created_at=datetime.now(timezone.utc) - timedelta(days=days_ago),
        )
        db_session.add(contribution)
        await db_session.commit()
        return contribution

    return _make


# =============================================================================
# API
# =============================================================================


@pytest.fixture
async def app(db_session: AsyncSession) -> AsyncGenerator[Any, None]:
    """FastAPI application bound to the test session."""
    from main import app as fastapi_app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Origin": "http://localhost:3000"},
    ) as ac:
        yield ac


def auth_headers_for(user: User) -> dict[str, str]:
    """Bearer headers carrying a valid access token for `user`."""
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    """Build bearer headers for any user."""
    return auth_headers_for


@pytest.fixture
async def user(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user()


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    """Generate authentication headers for the default test user."""
    return auth_headers_for(user)
