"""Project lifecycle service."""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.searchmatic.core.cache import invalidate_committed_stats, invalidate_stats
from src.searchmatic.core.exceptions import ConflictError, ValidationError
from src.searchmatic.core.logging import get_logger
from src.searchmatic.models import EnumField, Project
from src.searchmatic.models.base import utc_now
from src.searchmatic.repositories import ProjectRepository
from src.searchmatic.schemas.project import ProjectCreate, ProjectUpdate
from src.searchmatic.schemas.stats import (
    DashboardStats,
    ProgressStudies,
    ProjectAnalytics,
    ProjectProgress,
    ProjectStats,
)
from src.searchmatic.services.access import get_owned_project
from src.searchmatic.services.enum_registry import EnumRegistryService
from src.searchmatic.services.stats_service import (
    StatisticsAggregator,
    percent,
    reviewed_studies,
)

logger = get_logger(__name__)

# Columns that may be omitted from an update but never set to null
_REQUIRED_FIELDS = frozenset(
    {"title", "project_type", "status", "progress_percentage", "current_stage", "team_size"}
)


def _check_title(title: str) -> None:
    if not title:
        raise ValidationError("Project title cannot be empty or whitespace only")


def _check_progress(progress: int) -> None:
    if not 0 <= progress <= 100:
        raise ValidationError(f"progress_percentage must be between 0 and 100, got {progress}")


def _check_team_size(team_size: int) -> None:
    if team_size < 1:
        raise ValidationError(f"team_size must be at least 1, got {team_size}")


class ProjectService:
    """Create, read, update and delete projects on behalf of their owner."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        enum_service: EnumRegistryService,
        stats: StatisticsAggregator,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.enum_service = enum_service
        self.stats = stats
        self.session = session

    async def create_project(self, owner_id: UUID, data: ProjectCreate) -> Project:
        """Create a project owned by owner_id.

        Omitted project_type and status take the registry defaults
        (systematic_review and draft).

        Raises:
            ValidationError: If title is empty or a number is out of range
            InvalidEnumValue: If project_type or status is not registered
        """
        _check_title(data.title)
        _check_progress(data.progress_percentage)
        _check_team_size(data.team_size)
        project_type = await self.enum_service.resolve(EnumField.PROJECT_TYPE, data.project_type)
        status = await self.enum_service.resolve(EnumField.PROJECT_STATUS, data.status)

        now = utc_now()
        project = Project(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            project_type=project_type,
            status=status,
            research_domain=data.research_domain,
            progress_percentage=data.progress_percentage,
            current_stage=data.current_stage,
            team_size=data.team_size,
            created_at=now,
            updated_at=now,
            last_activity_at=now,
        )
        self.project_repo.add(project)

        try:
            await self.session.commit()
            await self.session.refresh(project)
        except IntegrityError as e:
            await self.session.rollback()
            raise ValidationError("Project violates a storage constraint") from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Project created", project_id=str(project.id), project_type=project_type)
        return project

    async def get_project(self, requester_id: UUID, project_id: UUID) -> Project:
        """Get a project the requester owns.

        Raises:
            NotFound: If the project does not exist
            Forbidden: If the requester is not the owner
        """
        return await get_owned_project(self.project_repo, project_id, requester_id)

    async def list_projects(
        self,
        owner_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Project], str | None, bool]:
        """List the owner's projects, most recently active first."""
        return await self.project_repo.list_for_owner(owner_id, cursor=cursor, limit=limit)

    async def update_project(
        self,
        requester_id: UUID,
        project_id: UUID,
        data: ProjectUpdate,
    ) -> Project:
        """Apply the fields set on data.

        All checks run before any attribute is changed, so a rejected update
        leaves the stored row untouched.

        Raises:
            NotFound, Forbidden: Per get_project
            ValidationError: On empty title, null required field or out-of-range number
            InvalidEnumValue: If project_type or status is not registered
        """
        project = await get_owned_project(self.project_repo, project_id, requester_id)
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)

        for field in _REQUIRED_FIELDS & changes.keys():
            if changes[field] is None:
                raise ValidationError(f"{field} cannot be null")
        if "title" in changes:
            _check_title(changes["title"])
        if "progress_percentage" in changes:
            _check_progress(changes["progress_percentage"])
        if "team_size" in changes:
            _check_team_size(changes["team_size"])
        if "project_type" in changes:
            await self.enum_service.require(EnumField.PROJECT_TYPE, changes["project_type"])
        if "status" in changes:
            await self.enum_service.require(EnumField.PROJECT_STATUS, changes["status"])

        for field, value in changes.items():
            setattr(project, field, value)
        project.touch()

        try:
            await self.session.commit()
            await self.session.refresh(project)
        except IntegrityError as e:
            await self.session.rollback()
            raise ValidationError("Project violates a storage constraint") from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Project updated", project_id=str(project_id), fields=sorted(changes))
        return project

    async def delete_project(self, requester_id: UUID, project_id: UUID) -> None:
        """Delete a project together with all of its studies.

        Raises:
            NotFound, Forbidden: Per get_project
            ConflictError: If the cascade could not be committed; nothing was deleted
        """
        project = await get_owned_project(self.project_repo, project_id, requester_id)

        try:
            deleted_studies = await self.project_repo.delete_cascade(project)
            await invalidate_stats(project_id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.warning("Project delete rolled back", project_id=str(project_id), error=str(e))
            raise ConflictError("Project could not be deleted atomically, retry") from e
        except Exception:
            await self.session.rollback()
            raise

        await invalidate_committed_stats(project_id)
        logger.info(
            "Project deleted",
            project_id=str(project_id),
            deleted_studies=deleted_studies,
        )

    async def get_project_stats(self, requester_id: UUID, project_id: UUID) -> ProjectStats:
        """Study counts for a project the requester owns."""
        await get_owned_project(self.project_repo, project_id, requester_id)
        return await self.stats.compute_stats(project_id)

    async def get_dashboard_stats(self, owner_id: UUID) -> DashboardStats:
        """Summary over all of the owner's projects."""
        return await self.stats.compute_dashboard(owner_id)

    async def get_project_analytics(
        self, requester_id: UUID, project_id: UUID
    ) -> ProjectAnalytics:
        """Study counts with completion and inclusion rates."""
        await get_owned_project(self.project_repo, project_id, requester_id)
        return await self.stats.compute_analytics(project_id)

    async def get_project_progress(self, requester_id: UUID, project_id: UUID) -> ProjectProgress:
        """Recorded progress, stage and status alongside the study counts."""
        project = await get_owned_project(self.project_repo, project_id, requester_id)
        stats = await self.stats.compute_stats(project_id)
        return _progress(project, stats)

    async def update_project_progress(
        self, requester_id: UUID, project_id: UUID
    ) -> ProjectProgress:
        """Set progress_percentage to the share of studies already screened.

        A project without studies gets 0. The project's activity timestamps
        are refreshed.

        Raises:
            NotFound, Forbidden: Per get_project
        """
        project = await get_owned_project(self.project_repo, project_id, requester_id)
        stats = await self.stats.compute_stats(project_id)

        project.progress_percentage = percent(reviewed_studies(stats), stats.total_studies)
        project.touch()
        try:
            await self.session.commit()
            await self.session.refresh(project)
        except IntegrityError as e:
            await self.session.rollback()
            raise ValidationError("Project violates a storage constraint") from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Project progress recalculated",
            project_id=str(project_id),
            progress_percentage=project.progress_percentage,
        )
        return _progress(project, stats)


def _progress(project: Project, stats: ProjectStats) -> ProjectProgress:
    return ProjectProgress(
        percentage=project.progress_percentage,
        current_stage=project.current_stage,
        status=project.status,
        studies=ProgressStudies(
            total=stats.total_studies,
            completed=reviewed_studies(stats),
            remaining=stats.pending_studies,
        ),
        last_activity=stats.last_updated,
    )
