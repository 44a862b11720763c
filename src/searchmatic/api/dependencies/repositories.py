"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.searchmatic.api.dependencies.db import DBSession, OwnerDBSession
from src.searchmatic.repositories import (
    EnumValueRepository,
    ProjectRepository,
    StudyRepository,
)


def get_project_repository(session: OwnerDBSession) -> ProjectRepository:
    """Get project repository with owner-scoped session."""
    return ProjectRepository(session)


def get_study_repository(session: OwnerDBSession) -> StudyRepository:
    """Get study repository with owner-scoped session."""
    return StudyRepository(session)


def get_enum_value_repository(session: DBSession) -> EnumValueRepository:
    """Get enum value repository (registry table has no owner)."""
    return EnumValueRepository(session)


ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
StudyRepo = Annotated[StudyRepository, Depends(get_study_repository)]
EnumValueRepo = Annotated[EnumValueRepository, Depends(get_enum_value_repository)]
