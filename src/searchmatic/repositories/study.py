"""Repository for Study entity."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.searchmatic.models import Study
from src.searchmatic.repositories.base import BaseRepository


class StudyRepository(BaseRepository[Study]):
    """Repository for Study entity."""

    model = Study

    async def list_for_project(
        self,
        project_id: UUID,
        owner_id: UUID,
        status: str | None = None,
    ) -> list[Study]:
        """List a project's studies, newest first.

        Args:
            project_id: Parent project
            owner_id: Owner predicate applied alongside the project filter
            status: Optional status filter
        """
        query = select(Study).where(Study.project_id == project_id, Study.owner_id == owner_id)
        if status is not None:
            query = query.where(Study.status == status)
        query = query.order_by(col(Study.created_at).desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_by_status(self, project_id: UUID) -> tuple[dict[str, int], datetime | None]:
        """Aggregate a project's studies.

        Returns:
            Tuple of ({status: count}, max(updated_at)); the timestamp is None
            when the project has no studies.
        """
        counts_result = await self.session.execute(
            select(Study.status, func.count())
            .where(Study.project_id == project_id)
            .group_by(Study.status)
        )
        counts = {status: int(count) for status, count in counts_result.all()}

        latest_result = await self.session.execute(
            select(func.max(Study.updated_at)).where(Study.project_id == project_id)
        )
        return counts, latest_result.scalar_one_or_none()
