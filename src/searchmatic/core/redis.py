"""Optional Redis client used for caching derived data.

Redis is never the source of truth here. When REDIS_URL is unset or the
server cannot be reached, callers get None and compute results directly.
"""

from redis.asyncio import ConnectionPool, Redis

from src.searchmatic.core.config import get_settings
from src.searchmatic.core.logging import get_logger

logger = get_logger(__name__)

_client: Redis | None = None
# Set after the first attempt, successful or not; cleared by close_redis()
_attempted = False


async def _connect(url: str, max_connections: int) -> Redis | None:
    pool = ConnectionPool.from_url(url, max_connections=max_connections, decode_responses=True)
    client = Redis(connection_pool=pool)
    try:
        await client.ping()  # type: ignore[misc]
    except Exception as e:
        logger.warning("Redis unreachable, stats cache disabled", error=str(e))
        await client.aclose(close_connection_pool=True)
        return None
    logger.info("Redis connected")
    return client


async def get_redis() -> Redis | None:
    """Shared client, connecting lazily. A failed attempt is not retried."""
    global _client, _attempted
    if _client is not None or _attempted:
        return _client
    _attempted = True

    settings = get_settings()
    if not settings.redis_url:
        logger.info("Redis not configured, stats cache disabled")
        return None
    _client = await _connect(settings.redis_url, settings.redis_pool_size)
    return _client


async def close_redis() -> None:
    """Close the client and its pool; the next get_redis() connects afresh."""
    client = _client
    reset_redis_state()
    if client is not None:
        await client.aclose(close_connection_pool=True)


def reset_redis_state() -> None:
    """Forget the current client without closing it (tests only)."""
    global _client, _attempted
    _client = None
    _attempted = False
