"""Built-in categorical values.

These seed the enumeration registry. Values registered later are stored in
the enum_values table; nothing here may be removed or renamed because
existing rows keep referring to it.
"""

from enum import Enum


class EnumField(str, Enum):
    """Categorical columns whose legal values live in the registry."""

    PROJECT_TYPE = "project_type"
    PROJECT_STATUS = "project_status"
    STUDY_TYPE = "study_type"
    STUDY_STATUS = "study_status"


class ProjectType(str, Enum):
    SYSTEMATIC_REVIEW = "systematic_review"
    META_ANALYSIS = "meta_analysis"
    SCOPING_REVIEW = "scoping_review"
    NARRATIVE_REVIEW = "narrative_review"
    UMBRELLA_REVIEW = "umbrella_review"
    CUSTOM = "custom"
    # Legacy onboarding markers, still present on old rows
    GUIDED = "guided"
    BRING_YOUR_OWN = "bring_your_own"


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    REVIEW = "review"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class StudyType(str, Enum):
    ARTICLE = "article"
    THESIS = "thesis"
    BOOK = "book"
    CONFERENCE_PAPER = "conference_paper"
    REPORT = "report"
    PATENT = "patent"
    OTHER = "other"


class StudyStatus(str, Enum):
    """Screening state of a study."""

    PENDING = "pending"
    SCREENING = "screening"
    INCLUDED = "included"
    EXCLUDED = "excluded"
    DUPLICATE = "duplicate"
    EXTRACTED = "extracted"


BUILTIN_VALUES: dict[EnumField, type[Enum]] = {
    EnumField.PROJECT_TYPE: ProjectType,
    EnumField.PROJECT_STATUS: ProjectStatus,
    EnumField.STUDY_TYPE: StudyType,
    EnumField.STUDY_STATUS: StudyStatus,
}

DEFAULT_VALUES: dict[EnumField, str] = {
    EnumField.PROJECT_TYPE: ProjectType.SYSTEMATIC_REVIEW.value,
    EnumField.PROJECT_STATUS: ProjectStatus.DRAFT.value,
    EnumField.STUDY_TYPE: StudyType.ARTICLE.value,
    EnumField.STUDY_STATUS: StudyStatus.PENDING.value,
}

# Intended screening progression. Only enforced when
# ENFORCE_STUDY_STATUS_TRANSITIONS is enabled.
STUDY_STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    StudyStatus.PENDING.value: frozenset({StudyStatus.SCREENING.value}),
    StudyStatus.SCREENING.value: frozenset(
        {
            StudyStatus.INCLUDED.value,
            StudyStatus.EXCLUDED.value,
            StudyStatus.DUPLICATE.value,
        }
    ),
    StudyStatus.INCLUDED.value: frozenset({StudyStatus.EXTRACTED.value}),
    StudyStatus.EXCLUDED.value: frozenset(),
    StudyStatus.DUPLICATE.value: frozenset(),
    StudyStatus.EXTRACTED.value: frozenset(),
}
