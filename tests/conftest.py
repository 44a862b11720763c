"""Fixtures available to unit and integration tests alike.

The database engine, sessions, services and HTTP client live in
tests/integration/conftest.py.
"""

import os

# Settings are read at import time by src.searchmatic.main
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DATABASE_SSL_MODE", "disable")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-characters")

# ruff: noqa: E402
from collections.abc import AsyncGenerator, Generator

import pytest
from fakeredis import aioredis as fakeredis_aio
from redis.asyncio import Redis

from src.searchmatic.core import redis as redis_core
from src.searchmatic.core.config import get_settings
from src.searchmatic.services import get_enum_registry

# Settings may have been cached before the variables above were set
get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _fresh_enum_registry() -> Generator[None]:
    """Each test starts from the built-in enumeration values."""
    get_enum_registry.cache_clear()
    yield
    get_enum_registry.cache_clear()


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """Provides a fakeredis client for testing."""
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def mock_redis(fake_redis: Redis, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Redis]:
    """Patches get_redis() to return the fakeredis client.

    Patches both src.searchmatic.core.redis and src.searchmatic.core.cache
    so the fake is used everywhere.
    """
    redis_core.reset_redis_state()

    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr("src.searchmatic.core.redis.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.searchmatic.core.cache.get_redis", _get_fake_redis)
    yield fake_redis
    redis_core.reset_redis_state()


@pytest.fixture
async def mock_redis_unavailable(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[None]:
    """Patches get_redis() to return None (simulates Redis unavailable)."""
    redis_core.reset_redis_state()

    async def _get_none() -> None:
        return None

    monkeypatch.setattr("src.searchmatic.core.redis.get_redis", _get_none)
    monkeypatch.setattr("src.searchmatic.core.cache.get_redis", _get_none)
    yield
    redis_core.reset_redis_state()
