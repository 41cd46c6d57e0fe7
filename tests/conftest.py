"""Pytest configuration and fixtures.

Both apps run in-process:
- backend against a temporary sqlite database and the in-memory blacklist
- frontend with its backend httpx client wired straight to the backend ASGI app
"""

from collections.abc import AsyncGenerator
from datetime import timedelta

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from jokes_api.core.config import Settings
from jokes_api.core.database import init_db
from jokes_api.jwt.blocklist import InMemoryRevocationRegistry
from jokes_api.jwt.tokens import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenCodec
from jokes_api.main import create_app
from jokes_web.core.config import WebSettings
from jokes_web.main import create_app as create_web_app

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"
SESSION_SECRET = "test-session-secret"
ISSUER = "remix-jokes"
API_BASE_URL = "http://api.test"


def expired_access_token(user_id: str) -> str:
    """Correctly signed access token that expired a minute ago."""
    codec = TokenCodec(ACCESS_SECRET, ISSUER, timedelta(seconds=-60), ACCESS_TOKEN_TYPE)
    return codec.encode(user_id)


def refresh_token_for(user_id: str) -> str:
    """Validly signed refresh token minted outside of a login."""
    codec = TokenCodec(REFRESH_SECRET, ISSUER, timedelta(days=365), REFRESH_TOKEN_TYPE)
    return codec.encode(user_id)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        ACCESS_TOKEN_SECRET=ACCESS_SECRET,
        REFRESH_TOKEN_SECRET=REFRESH_SECRET,
        JWT_ISSUER=ISSUER,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        REDIS_URL="",
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture
def registry() -> InMemoryRevocationRegistry:
    return InMemoryRevocationRegistry()


@pytest_asyncio.fixture
async def backend_app(settings, registry) -> AsyncGenerator[FastAPI, None]:
    app = create_app(settings, registry=registry)
    await init_db(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def async_client(backend_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=backend_app)
    async with httpx.AsyncClient(transport=transport, base_url=API_BASE_URL) as client:
        yield client


@pytest.fixture
def web_settings() -> WebSettings:
    return WebSettings(
        _env_file=None,
        SESSION_SECRET=SESSION_SECRET,
        ACCESS_TOKEN_SECRET=ACCESS_SECRET,
        JWT_ISSUER=ISSUER,
        API_URL=API_BASE_URL,
        API_TIMEOUT_SECONDS=5,
    )


@pytest_asyncio.fixture
async def web_app(web_settings, backend_app) -> AsyncGenerator[FastAPI, None]:
    app = create_web_app(web_settings, transport=httpx.ASGITransport(app=backend_app))
    yield app
    await app.state.http.aclose()


@pytest_asyncio.fixture
async def web_client(web_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=web_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://web.test") as client:
        yield client


async def register_user(client: httpx.AsyncClient, username: str, password: str) -> dict:
    response = await client.post("/auth/register", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["user"]


async def login_user(client: httpx.AsyncClient, username: str, password: str) -> dict:
    response = await client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
