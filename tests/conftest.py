"""
Shared test fixtures for the LOJA API test suite.

Each test gets its own SQLite database file (aiosqlite) with the full
schema, injected into ``create_app``.
"""

import os
import sys
from typing import Any, AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOGIN_RATE_LIMIT"] = "1000/minute"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.pool import NullPool

from loja.core.security import create_access_token, get_password_hash
from loja.db.base import Base
from loja.db.gateway import DataGateway
from loja.main import create_app
from loja.models.user import UserRole

DEFAULT_PASSWORD = "senha-segura-1"


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh database with every table created."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'loja.db'}",
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def app(engine: AsyncEngine):
    return create_app(engine)


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def gateway(db_session: AsyncSession) -> DataGateway:
    return DataGateway(db_session)


# ── Users ───────────────────────────────────────────────────────────
async def make_user(
    gateway: DataGateway,
    email: str,
    role: UserRole = UserRole.USER,
    password: str = DEFAULT_PASSWORD,
    active: bool = True,
    name: str | None = None,
) -> dict[str, Any]:
    rows = await gateway.insert(
        "users",
        {
            "email": email,
            "password": get_password_hash(password),
            "name": name or email.split("@")[0],
            "role": role.value,
            "active": active,
        },
    )
    return rows[0]


def auth_headers(user: dict[str, Any]) -> dict[str, str]:
    token = create_access_token(user["id"], user["role"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def master_admin(gateway: DataGateway) -> dict[str, Any]:
    return await make_user(gateway, "master@loja.com", UserRole.MASTER_ADMIN)


@pytest.fixture
async def admin(gateway: DataGateway) -> dict[str, Any]:
    return await make_user(gateway, "admin@loja.com", UserRole.ADMIN)


@pytest.fixture
async def regular_user(gateway: DataGateway) -> dict[str, Any]:
    return await make_user(gateway, "user@loja.com", UserRole.USER)


@pytest.fixture
def master_headers(master_admin: dict[str, Any]) -> dict[str, str]:
    return auth_headers(master_admin)


@pytest.fixture
def admin_headers(admin: dict[str, Any]) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def user_headers(regular_user: dict[str, Any]) -> dict[str, str]:
    return auth_headers(regular_user)


@pytest.fixture
def user_factory(gateway: DataGateway):
    """Create users straight in the database: ``await user_factory(email, role=...)``."""

    async def _create(email: str, **kwargs: Any) -> dict[str, Any]:
        return await make_user(gateway, email, **kwargs)

    return _create


@pytest.fixture
def headers_for():
    """Build an ``Authorization`` header for any user dict."""
    return auth_headers


@pytest.fixture
def default_password() -> str:
    return DEFAULT_PASSWORD
