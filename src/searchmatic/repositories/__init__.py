"""Repository layer - data access abstraction."""

from src.searchmatic.repositories.base import BaseRepository
from src.searchmatic.repositories.enum_value import EnumValueRepository
from src.searchmatic.repositories.project import ProjectRepository
from src.searchmatic.repositories.study import StudyRepository

__all__ = [
    "BaseRepository",
    "EnumValueRepository",
    "ProjectRepository",
    "StudyRepository",
]
