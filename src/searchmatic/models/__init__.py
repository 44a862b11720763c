"""Model exports.

Import from here: `from src.searchmatic.models import Project, Study`
"""

from src.searchmatic.models.enum_value import EnumValue
from src.searchmatic.models.enums import (
    DEFAULT_VALUES,
    STUDY_STATUS_TRANSITIONS,
    EnumField,
    ProjectStatus,
    ProjectType,
    StudyStatus,
    StudyType,
)
from src.searchmatic.models.project import Project
from src.searchmatic.models.study import Study

__all__ = [
    # Enums
    "DEFAULT_VALUES",
    "STUDY_STATUS_TRANSITIONS",
    "EnumField",
    "ProjectStatus",
    "ProjectType",
    "StudyStatus",
    "StudyType",
    # Tables
    "EnumValue",
    "Project",
    "Study",
]
