"""Study service - studies are always reached through an owned project."""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.searchmatic.core.cache import invalidate_committed_stats, invalidate_stats
from src.searchmatic.core.exceptions import ConflictError, ValidationError
from src.searchmatic.core.logging import get_logger
from src.searchmatic.models import STUDY_STATUS_TRANSITIONS, EnumField, Project, Study
from src.searchmatic.models.base import utc_now
from src.searchmatic.repositories import ProjectRepository, StudyRepository
from src.searchmatic.schemas.study import StudyCreate, StudyUpdate
from src.searchmatic.services.access import get_owned_project, get_owned_study
from src.searchmatic.services.enum_registry import EnumRegistryService

logger = get_logger(__name__)

_REQUIRED_FIELDS = frozenset({"title", "study_type", "status", "keywords"})


def _check_title(title: str) -> None:
    if not title:
        raise ValidationError("Study title cannot be empty or whitespace only")


def _check_quality_score(score: int | None) -> None:
    if score is not None and not 0 <= score <= 10:
        raise ValidationError(f"quality_score must be between 0 and 10, got {score}")


def check_status_transition(current: str, new: str) -> None:
    """Reject a move that skips or reverses the screening progression.

    Statuses outside the built-in progression (registered later) are not
    constrained.

    Raises:
        ValidationError: If new is not reachable from current
    """
    if current == new:
        return
    if current not in STUDY_STATUS_TRANSITIONS or new not in STUDY_STATUS_TRANSITIONS:
        return
    if new not in STUDY_STATUS_TRANSITIONS[current]:
        raise ValidationError(f"Study status cannot change from {current!r} to {new!r}")


class StudyService:
    """Create, read, update and delete studies on behalf of the project owner."""

    def __init__(
        self,
        study_repo: StudyRepository,
        project_repo: ProjectRepository,
        enum_service: EnumRegistryService,
        session: AsyncSession,
        enforce_transitions: bool = False,
    ):
        self.study_repo = study_repo
        self.project_repo = project_repo
        self.enum_service = enum_service
        self.session = session
        self.enforce_transitions = enforce_transitions

    async def _commit(self, project: Project, *refresh: Any) -> None:
        """Touch the parent project and commit the unit of work.

        Cached stats are invalidated before the commit, so a Redis failure
        aborts the write, and again after it, where a failure is only logged.
        """
        project.touch()
        try:
            await invalidate_stats(project.id)
            await self.session.commit()
            for entity in refresh:
                await self.session.refresh(entity)
        except IntegrityError as e:
            # Parent removed concurrently or a constraint tripped
            await self.session.rollback()
            raise ConflictError("Study write conflicted with a concurrent change, retry") from e
        except Exception:
            await self.session.rollback()
            raise
        await invalidate_committed_stats(project.id)

    async def create_study(self, owner_id: UUID, project_id: UUID, data: StudyCreate) -> Study:
        """Create a study in one of the owner's projects.

        owner_id on the new row is copied from the project, never from input.

        Raises:
            NotFound, Forbidden: If the project is missing or not owned
            ValidationError: On empty title or out-of-range quality score
            InvalidEnumValue: If study_type or status is not registered
        """
        project = await get_owned_project(self.project_repo, project_id, owner_id)
        _check_title(data.title)
        _check_quality_score(data.quality_score)
        study_type = await self.enum_service.resolve(EnumField.STUDY_TYPE, data.study_type)
        status = await self.enum_service.resolve(EnumField.STUDY_STATUS, data.status)

        now = utc_now()
        study = Study(
            **data.model_dump(exclude={"study_type", "status"}),
            project_id=project.id,
            owner_id=project.owner_id,
            study_type=study_type,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.study_repo.add(study)
        await self._commit(project, study)

        logger.info("Study created", study_id=str(study.id), project_id=str(project.id))
        return study

    async def get_study(self, owner_id: UUID, study_id: UUID) -> Study:
        study, _ = await get_owned_study(self.study_repo, self.project_repo, study_id, owner_id)
        return study

    async def list_studies(
        self,
        owner_id: UUID,
        project_id: UUID,
        status: str | None = None,
    ) -> list[Study]:
        """List a project's studies, newest first, optionally filtered by status."""
        await get_owned_project(self.project_repo, project_id, owner_id)
        if status is not None:
            await self.enum_service.require(EnumField.STUDY_STATUS, status)
        return await self.study_repo.list_for_project(project_id, owner_id, status=status)

    async def update_study(self, owner_id: UUID, study_id: UUID, data: StudyUpdate) -> Study:
        """Apply the fields set on data.

        Raises:
            NotFound, Forbidden: If the study is missing or its project not owned
            ValidationError: On empty title, null required field, out-of-range
                quality score or a disallowed status transition
            InvalidEnumValue: If study_type or status is not registered
        """
        study, project = await get_owned_study(
            self.study_repo, self.project_repo, study_id, owner_id
        )
        changes: dict[str, Any] = data.model_dump(exclude_unset=True)

        for field in _REQUIRED_FIELDS & changes.keys():
            if changes[field] is None:
                raise ValidationError(f"{field} cannot be null")
        if "title" in changes:
            _check_title(changes["title"])
        if "quality_score" in changes:
            _check_quality_score(changes["quality_score"])
        if "study_type" in changes:
            await self.enum_service.require(EnumField.STUDY_TYPE, changes["study_type"])
        if "status" in changes:
            await self.enum_service.require(EnumField.STUDY_STATUS, changes["status"])
            if self.enforce_transitions:
                check_status_transition(study.status, changes["status"])

        for field, value in changes.items():
            setattr(study, field, value)
        study.updated_at = utc_now()
        await self._commit(project, study)

        logger.info("Study updated", study_id=str(study_id), fields=sorted(changes))
        return study

    async def delete_study(self, owner_id: UUID, study_id: UUID) -> None:
        """Delete one study. Nothing else cascades from a study."""
        study, project = await get_owned_study(
            self.study_repo, self.project_repo, study_id, owner_id
        )
        await self.study_repo.delete(study)
        await self._commit(project)

        logger.info("Study deleted", study_id=str(study_id), project_id=str(project.id))
