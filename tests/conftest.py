"""
Pytest fixtures - in-memory test DB, API client, users and auth headers.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eventhub.core.security import create_access_token, hash_password
from eventhub.db.base import Base
from eventhub.db.models import Event, User  # noqa: F401 - register tables
from eventhub.db.repositories.user_repository import UserRepository
from eventhub.db.session import get_db
from eventhub.main import app
from eventhub.schemas.user import UserCreate, UserResponse

# One shared in-memory SQLite connection per test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "password123"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as s:
        yield s


@pytest_asyncio.fixture
async def client(session: AsyncSession):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def repo(session: AsyncSession) -> UserRepository:
    return UserRepository(session)


def _user_data(username: str = "runner", **overrides) -> UserCreate:
    data = {
        "username": username,
        "email": f"{username}@example.com",
        "password": hash_password(TEST_PASSWORD),
        "birth_date_string": "1990-05-01",
        "location": "Madrid",
        "gender": "female",
    }
    data.update(overrides)
    return UserCreate(**data)


@pytest.fixture
def make_user_data():
    """Factory for UserCreate payloads with a pre-hashed password."""
    return _user_data


@pytest_asyncio.fixture
async def test_user(repo: UserRepository) -> UserResponse:
    return await repo.create(_user_data("runner"))


@pytest_asyncio.fixture
async def other_user(repo: UserRepository) -> UserResponse:
    return await repo.create(_user_data("cyclist"))


@pytest_asyncio.fixture
def auth_headers(test_user: UserResponse) -> dict:
    token = create_access_token(test_user.id, test_user.role)
    return {"Authorization": f"Bearer {token}"}
