import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.core import db as db_module
from app.main import app
from app.models.login_data import LoginData
from app.services.user_service import user_service


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database for service-level tests (no HTTP client).
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest.fixture
def encrypt():
    """
    Encrypt a plain password the way the frontend does (RSA public key).
    """
    return user_service.sensitive_data.encrypt


@pytest_asyncio.fixture
async def create_user(db, encrypt):
    """
    Factory fixture creating users through UserService.register.
    Returns (LoginData with user prefetched, plain password).
    """

    async def _create_user(password: str = "UserPass!23", admin: bool = False) -> tuple[LoginData, str]:
        username = f"{'admin' if admin else 'user'}_{uuid.uuid4().hex[:6]}"
        await user_service.register(f"Name {username}", username, encrypt(password), admin)
        login_data = await LoginData.get(username=username).prefetch_related("user")
        return login_data, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client, encrypt):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"username": username, "password": encrypt(password)},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers
