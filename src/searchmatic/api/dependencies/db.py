"""Database session dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.searchmatic.api.dependencies.auth import CurrentUserId
from src.searchmatic.core.db import get_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """Session without an owner; owner-scoped tables are hidden by row-level security."""
    async with get_session() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_owner_db_session(owner_id: CurrentUserId) -> AsyncGenerator[AsyncSession]:
    """Session tagged with the authenticated owner for row-level security."""
    async with get_session(owner_id=owner_id) as session:
        yield session


OwnerDBSession = Annotated[AsyncSession, Depends(get_owner_db_session)]
