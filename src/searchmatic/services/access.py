"""Owner checks shared by the project and study services."""

from uuid import UUID

from src.searchmatic.core.exceptions import Forbidden, NotFound
from src.searchmatic.core.logging import get_logger
from src.searchmatic.models import Project, Study
from src.searchmatic.repositories import ProjectRepository, StudyRepository

logger = get_logger(__name__)


async def get_owned_project(
    project_repo: ProjectRepository,
    project_id: UUID,
    requester_id: UUID,
) -> Project:
    """Load a project the requester owns.

    With row-level security active another owner's project is invisible and
    surfaces as NotFound; Forbidden is only reachable when the store returns
    the row, and is logged for auditing.

    Raises:
        NotFound: If the project does not exist
        Forbidden: If it belongs to someone else
    """
    project = await project_repo.get_by_id(project_id)
    if project is None:
        raise NotFound("project", project_id)
    if project.owner_id != requester_id:
        logger.warning(
            "Project access denied",
            project_id=str(project_id),
            requester_id=str(requester_id),
        )
        raise Forbidden("project", project_id, requester_id)
    return project


async def get_owned_study(
    study_repo: StudyRepository,
    project_repo: ProjectRepository,
    study_id: UUID,
    requester_id: UUID,
) -> tuple[Study, Project]:
    """Load a study and its parent, deriving ownership through the parent project."""
    study = await study_repo.get_by_id(study_id)
    if study is None:
        raise NotFound("study", study_id)
    try:
        project = await get_owned_project(project_repo, study.project_id, requester_id)
    except Forbidden as e:
        raise Forbidden("study", study_id, requester_id) from e
    except NotFound as e:
        # Orphaned row; the foreign key makes this unreachable on PostgreSQL
        raise NotFound("study", study_id) from e
    return study, project
