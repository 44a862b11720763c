"""Repository for persisted enumeration registrations."""

from sqlalchemy import func
from sqlmodel import col, select

from src.searchmatic.models import EnumValue
from src.searchmatic.repositories.base import BaseRepository


class EnumValueRepository(BaseRepository[EnumValue]):
    """Repository for EnumValue entity. Append-only: no update or delete helpers."""

    model = EnumValue

    async def list_all(self) -> list[EnumValue]:
        """All registrations in version order."""
        result = await self.session.execute(select(EnumValue).order_by(col(EnumValue.version)))
        return list(result.scalars().all())

    async def get(self, field: str, value: str) -> EnumValue | None:
        result = await self.session.execute(
            select(EnumValue).where(EnumValue.field == field, EnumValue.value == value)
        )
        return result.scalar_one_or_none()

    async def max_version(self) -> int:
        result = await self.session.execute(select(func.max(EnumValue.version)))
        return result.scalar_one_or_none() or 0
