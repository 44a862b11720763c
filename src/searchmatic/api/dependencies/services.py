"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.searchmatic.api.dependencies.db import DBSession, OwnerDBSession
from src.searchmatic.api.dependencies.repositories import EnumValueRepo, ProjectRepo, StudyRepo
from src.searchmatic.core.config import get_settings
from src.searchmatic.repositories import EnumValueRepository
from src.searchmatic.services import (
    EnumRegistry,
    EnumRegistryService,
    ProjectService,
    StatisticsAggregator,
    StudyService,
    get_enum_registry,
)

Registry = Annotated[EnumRegistry, Depends(get_enum_registry)]


def get_enum_registry_service(
    enum_repo: EnumValueRepo,
    session: DBSession,
    registry: Registry,
) -> EnumRegistryService:
    """Get registry service for the enum endpoints."""
    return EnumRegistryService(enum_repo, session, registry)


def _owner_enum_service(session: OwnerDBSession, registry: Registry) -> EnumRegistryService:
    """Registry service sharing the request's owner session (reads only)."""
    return EnumRegistryService(EnumValueRepository(session), session, registry)


OwnerEnumService = Annotated[EnumRegistryService, Depends(_owner_enum_service)]


def get_project_service(
    project_repo: ProjectRepo,
    study_repo: StudyRepo,
    enum_service: OwnerEnumService,
    session: OwnerDBSession,
) -> ProjectService:
    """Get project service."""
    stats = StatisticsAggregator(study_repo, project_repo)
    return ProjectService(project_repo, enum_service, stats, session)


def get_study_service(
    study_repo: StudyRepo,
    project_repo: ProjectRepo,
    enum_service: OwnerEnumService,
    session: OwnerDBSession,
) -> StudyService:
    """Get study service."""
    return StudyService(
        study_repo,
        project_repo,
        enum_service,
        session,
        enforce_transitions=get_settings().enforce_study_status_transitions,
    )


EnumRegistryServiceDep = Annotated[EnumRegistryService, Depends(get_enum_registry_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
StudyServiceDep = Annotated[StudyService, Depends(get_study_service)]
