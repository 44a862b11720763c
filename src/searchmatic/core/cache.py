"""Project statistics cache with Redis backend and graceful fallback.

Entries are keyed by a per-project generation that every study write bumps.
A computation that started before a write stores its result under the old
generation, which nobody reads any more, so a cache hit always reflects the
current study rows. When Redis is unavailable every read is a miss and every
write is a no-op.
"""

from uuid import UUID

from redis.exceptions import RedisError

from src.searchmatic.core.config import get_settings
from src.searchmatic.core.logging import get_logger
from src.searchmatic.core.redis import get_redis

logger = get_logger(__name__)

PREFIX_PROJECT_STATS = "project_stats"
PREFIX_STATS_GENERATION = "project_stats_gen"


def stats_key(project_id: UUID, generation: int) -> str:
    return f"{PREFIX_PROJECT_STATS}:{project_id}:{generation}"


def generation_key(project_id: UUID) -> str:
    return f"{PREFIX_STATS_GENERATION}:{project_id}"


async def get_cached_stats(project_id: UUID) -> tuple[str | None, int]:
    """Return (payload, generation) for a project.

    payload is None on a miss; generation is the one a fresh computation
    must be stored under.
    """
    redis = await get_redis()
    if not redis:
        return None, 0
    generation = int(await redis.get(generation_key(project_id)) or 0)
    return await redis.get(stats_key(project_id, generation)), generation


async def set_cached_stats(project_id: UUID, generation: int, payload: str) -> bool:
    """Store a JSON payload under generation. Returns False if Redis is unavailable."""
    redis = await get_redis()
    if not redis:
        return False
    await redis.setex(
        stats_key(project_id, generation), get_settings().stats_cache_ttl_seconds, payload
    )
    return True


async def invalidate_stats(project_id: UUID) -> bool:
    """Move a project to a new generation. Returns False if Redis is unavailable."""
    redis = await get_redis()
    if not redis:
        return False
    key = generation_key(project_id)
    generation = await redis.incr(key)
    # Outlive every entry written under an earlier generation
    await redis.expire(key, get_settings().stats_cache_ttl_seconds * 2)
    await redis.delete(stats_key(project_id, generation - 1))
    logger.debug("Project stats invalidated", project_id=str(project_id), generation=generation)
    return True


async def invalidate_committed_stats(project_id: UUID) -> bool:
    """Invalidate after the write is committed.

    The write already succeeded, so a Redis failure here is logged rather
    than raised. Returns False when nothing was invalidated.
    """
    try:
        return await invalidate_stats(project_id)
    except RedisError as e:
        logger.warning(
            "Project stats invalidation failed after commit",
            project_id=str(project_id),
            error=str(e),
        )
        return False
