"""Repository for Project entity (owner-scoped)."""

from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select

from src.searchmatic.models import Project, Study
from src.searchmatic.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity.

    Every list query carries an explicit owner predicate in addition to the
    row-level security policy enforced by the database.
    """

    model = Project

    async def list_for_owner(
        self,
        owner_id: UUID,
        cursor: str | None = None,
        limit: int = 100,
    ) -> tuple[list[Project], str | None, bool]:
        """List an owner's projects, most recently active first.

        Args:
            owner_id: Owner to filter by
            cursor: Optional cursor for pagination
            limit: Maximum number of results

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(Project).where(Project.owner_id == owner_id)
        return await self.paginate(query, cursor, limit, Project.last_activity_at)

    async def list_progress_for_owner(self, owner_id: UUID) -> list[tuple[str, int]]:
        """Return (status, progress_percentage) for each of the owner's projects."""
        result = await self.session.execute(
            select(Project.status, Project.progress_percentage).where(
                Project.owner_id == owner_id
            )
        )
        return [(row[0], row[1]) for row in result.all()]

    async def delete_cascade(self, project: Project) -> int:
        """Delete a project and its studies within the current transaction.

        The foreign key also cascades; deleting children explicitly keeps the
        behaviour identical on backends that do not enforce foreign keys.

        Returns:
            Number of studies deleted
        """
        result = await self.session.execute(
            delete(Study).where(Study.project_id == project.id)  # type: ignore[arg-type]
        )
        await self.session.delete(project)
        await self.session.flush()
        return result.rowcount or 0
