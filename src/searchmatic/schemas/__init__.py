"""Request and response schemas."""

from src.searchmatic.schemas.enums import (
    EnumRegistryRead,
    EnumValueRegister,
    EnumValueRegistered,
    EnumValuesRead,
)
from src.searchmatic.schemas.pagination import PaginatedResponse
from src.searchmatic.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from src.searchmatic.schemas.stats import (
    DashboardStats,
    ProjectAnalytics,
    ProjectProgress,
    ProjectStats,
)
from src.searchmatic.schemas.study import StudyCreate, StudyRead, StudyUpdate

__all__ = [
    "DashboardStats",
    "EnumRegistryRead",
    "EnumValueRegister",
    "EnumValueRegistered",
    "EnumValuesRead",
    "PaginatedResponse",
    "ProjectAnalytics",
    "ProjectCreate",
    "ProjectProgress",
    "ProjectRead",
    "ProjectStats",
    "ProjectUpdate",
    "StudyCreate",
    "StudyRead",
    "StudyUpdate",
]
