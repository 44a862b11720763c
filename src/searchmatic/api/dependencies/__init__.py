"""FastAPI dependency injection definitions."""

from src.searchmatic.api.dependencies.auth import (
    CurrentUserId,
    EnumAdmin,
    get_current_user_id,
    require_enum_admin,
)
from src.searchmatic.api.dependencies.db import (
    DBSession,
    OwnerDBSession,
    get_db_session,
    get_owner_db_session,
)
from src.searchmatic.api.dependencies.services import (
    EnumRegistryServiceDep,
    ProjectServiceDep,
    Registry,
    StudyServiceDep,
    get_enum_registry_service,
    get_project_service,
    get_study_service,
)

__all__ = [
    # Auth
    "CurrentUserId",
    "EnumAdmin",
    "get_current_user_id",
    "require_enum_admin",
    # Database
    "DBSession",
    "OwnerDBSession",
    "get_db_session",
    "get_owner_db_session",
    # Services
    "EnumRegistryServiceDep",
    "ProjectServiceDep",
    "Registry",
    "StudyServiceDep",
    "get_enum_registry_service",
    "get_project_service",
    "get_study_service",
]
