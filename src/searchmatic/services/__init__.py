from src.searchmatic.services.enum_registry import (
    EnumRegistry,
    EnumRegistryService,
    get_enum_registry,
)
from src.searchmatic.services.project_service import ProjectService
from src.searchmatic.services.stats_service import StatisticsAggregator
from src.searchmatic.services.study_service import StudyService

__all__ = [
    "EnumRegistry",
    "EnumRegistryService",
    "ProjectService",
    "StatisticsAggregator",
    "StudyService",
    "get_enum_registry",
]
