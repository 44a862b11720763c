"""Project model - owner-scoped review project."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index, Text
from sqlmodel import Field, SQLModel

from src.searchmatic.models.base import utc_now
from src.searchmatic.models.enums import ProjectStatus, ProjectType


class Project(SQLModel, table=True):
    """A literature review project.

    Rows are protected by a row-level security policy on owner_id; see the
    0002 migration.
    """

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="ck_projects_progress_range",
        ),
        CheckConstraint("team_size >= 1", name="ck_projects_team_size"),
        Index("ix_projects_owner_last_activity", "owner_id", "last_activity_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: UUID = Field(index=True)
    title: str = Field(sa_type=Text)
    description: str | None = Field(default=None, sa_type=Text)
    project_type: str = Field(default=ProjectType.SYSTEMATIC_REVIEW.value, max_length=50)
    status: str = Field(default=ProjectStatus.DRAFT.value, max_length=50)
    research_domain: str | None = Field(default=None, sa_type=Text)
    progress_percentage: int = Field(default=0)
    current_stage: str = Field(default="Planning", max_length=100)
    team_size: int = Field(default=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    last_activity_at: datetime = Field(default_factory=utc_now)

    def touch(self) -> None:
        """Refresh modification timestamps after a change to the project or its studies."""
        now = utc_now()
        self.updated_at = now
        self.last_activity_at = now
