"""Owner-scoped database sessions.

Each session runs on its own pooled connection. When an owner is given,
the connection carries that identity in ``app.current_user_id`` for the
row-level security policies on projects and studies, and the setting is
cleared before the connection goes back to the pool.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, async_sessionmaker

from src.searchmatic.core.db.engine import get_engine

OWNER_SETTING = "app.current_user_id"

_SET_OWNER = text("SELECT set_config(:name, :value, false)")


async def _set_owner(connection: AsyncConnection, owner_id: UUID | None) -> None:
    # Row-level security is PostgreSQL only; other backends rely on repository filters
    if connection.dialect.name != "postgresql":
        return
    value = "" if owner_id is None else str(owner_id)
    await connection.execute(_SET_OWNER, {"name": OWNER_SETTING, "value": value})
    await connection.commit()


@asynccontextmanager
async def get_session(
    owner_id: UUID | None = None,
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession]:
    """Open a session, optionally acting as owner_id.

    Without an owner, projects and studies are invisible under row-level
    security; only owner-free tables such as enum_values can be used.

    Args:
        owner_id: Identity the row-level policies compare owner_id against
        engine: Engine override, used by tests
    """
    engine = engine or get_engine()

    async with engine.connect() as connection:
        await _set_owner(connection, owner_id)
        factory = async_sessionmaker(
            bind=connection,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        try:
            async with factory() as session:
                yield session
        finally:
            if owner_id is not None and not connection.closed:
                await connection.rollback()
                await _set_owner(connection, None)
