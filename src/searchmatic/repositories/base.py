"""Generic data access shared by the entity repositories."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.searchmatic.schemas.pagination import decode_cursor, encode_cursor

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Reads and staged writes for one table.

    Nothing here commits; the calling service owns the transaction.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        query = select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        return (await self.session.execute(query)).scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        await self.session.delete(entity)

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        sort_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Keyset pagination, newest first.

        Rows are ordered by (sort_field, id) descending so rows sharing a
        timestamp are neither skipped nor repeated across pages. An
        unreadable cursor restarts from the first page.

        Args:
            query: Select to paginate, already filtered
            cursor: Token returned with the previous page
            limit: Page size
            sort_field: Datetime column to order by

        Returns:
            (items, next_cursor, has_more)
        """
        id_field = self.model.id  # type: ignore[attr-defined]

        position = None
        if cursor:
            try:
                position = decode_cursor(cursor)
            except ValueError:
                position = None
        if position is not None:
            after, last_id = position
            query = query.where(
                or_(sort_field < after, and_(sort_field == after, id_field < last_id))
            )

        # One extra row tells us whether another page exists
        query = query.order_by(sort_field.desc(), id_field.desc()).limit(limit + 1)
        rows = list((await self.session.execute(query)).scalars().all())

        page, has_more = rows[:limit], len(rows) > limit
        next_cursor = None
        if has_more:
            last: Any = page[-1]
            next_cursor = encode_cursor(getattr(last, sort_field.key), last.id)
        return page, next_cursor, has_more
