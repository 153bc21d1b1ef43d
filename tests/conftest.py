"""Test configuration and fixtures."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")

import uuid
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import Base, build_engine, get_db
from app.core.security import create_access_token
from app.models.user import User
from app.services.companies import CompanyService
from app.services.permissions import PermissionService


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database with the permission catalog loaded."""
    engine = build_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await PermissionService.sync_permission_catalog(session)

    yield factory

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Session for fixtures and direct service calls."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client; every request gets its own session."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession) -> Callable:
    """Factory for identity rows, as the auth provider would write them."""
    async def _make(email: str, name: str = None) -> User:
        user = User(id=str(uuid.uuid4()), email=email, name=name or email.split("@")[0])
        db_session.add(user)
        await db_session.commit()
        return user
    return _make


@pytest_asyncio.fixture
async def owner(make_user) -> User:
    return await make_user("owner@example.com", "Olivia Owner")


@pytest_asyncio.fixture
async def outsider(make_user) -> User:
    return await make_user("outsider@example.com", "Oscar Outsider")


@pytest.fixture
def headers_for() -> Callable:
    """Bearer headers for any stored user."""
    def _headers(user: User) -> dict:
        token = create_access_token(user_id=user.id, email=user.email)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def auth_headers(owner: User, headers_for: Callable) -> dict:
    """Authorization headers for the company owner."""
    return headers_for(owner)


@pytest_asyncio.fixture
async def company(db_session: AsyncSession, owner: User):
    """A company bootstrapped by ``owner``."""
    company, _ = await CompanyService.create_company(db_session, owner.id, "Acme Coffee")
    return company
