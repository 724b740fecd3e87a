"""
Pytest configuration and fixtures.

Settings are read at import time, so the environment is prepared before any
erp_api module is imported. Every test gets a fresh in-memory SQLite
database; HTTP tests go through the real app with get_db overridden.
"""

import os

os.environ["SECRET_KEY"] = "test-secret-key-0123456789abcdef0123456789abcdef"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ACTIVATION_URL"] = "https://app.example.test/activate"
os.environ["JWT_ISSUER"] = "erp-api-test"
os.environ["JWT_AUDIENCE"] = "erp-clients-test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from erp_api.db.session import get_db
from erp_api.models import Base
from main import app

PASSWORD = "Str0ngPassw0rd!"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    """A session for service-level tests. Do not combine with `client`."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class Api:
    """Thin helpers over the HTTP surface to keep tests readable."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    @staticmethod
    def auth(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    async def register_company(self, name: str, admin_email: str) -> dict:
        resp = await self.client.post(
            "/companies/register",
            json={"name": name, "adminEmail": admin_email, "adminPassword": PASSWORD},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    async def login(self, email: str, password: str = PASSWORD) -> dict:
        resp = await self.client.post(
            "/account/login", json={"email": email, "password": password}
        )
        assert resp.status_code == 200, resp.text
        return resp.json()

    async def create_user(
        self,
        admin_token: str,
        email: str,
        password: str | None = PASSWORD,
        roles: list[str] | None = None,
    ) -> dict:
        body: dict = {"email": email}
        if password is not None:
            body["password"] = password
        if roles is not None:
            body["roles"] = roles
        resp = await self.client.post(
            "/account/users", json=body, headers=self.auth(admin_token)
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    async def set_permissions(self, admin_token: str, user_id: str, permissions: list[str]):
        return await self.client.put(
            f"/account/users/{user_id}/permissions",
            json={"permissions": permissions},
            headers=self.auth(admin_token),
        )

    async def get_permissions(self, admin_token: str, user_id: str) -> list[str]:
        resp = await self.client.get(
            f"/account/users/{user_id}/permissions", headers=self.auth(admin_token)
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["permissions"]


@pytest.fixture
def api(client) -> Api:
    return Api(client)


@pytest.fixture
async def acme(api) -> dict:
    """Company 'Acme' with its admin."""
    return await api.register_company("Acme", "admin@acme.com")


@pytest.fixture
async def globex(api) -> dict:
    """A second, unrelated company."""
    return await api.register_company("Globex", "admin@globex.com")
