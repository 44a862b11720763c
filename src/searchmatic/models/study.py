"""Study model - an article, thesis or other work tracked in a project."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, Column, ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.searchmatic.models.base import utc_now
from src.searchmatic.models.enums import StudyStatus, StudyType


class Study(SQLModel, table=True):
    """A study under review.

    owner_id duplicates the parent project's owner so the row-level policy
    can be evaluated without a join.
    """

    __tablename__ = "studies"
    __table_args__ = (
        CheckConstraint(
            "quality_score IS NULL OR (quality_score >= 0 AND quality_score <= 10)",
            name="ck_studies_quality_score_range",
        ),
        Index("ix_studies_project_status", "project_id", "status"),
        Index("ix_studies_project_created", "project_id", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(
        sa_column_args=[ForeignKey("projects.id", ondelete="CASCADE")],
        index=True,
    )
    owner_id: UUID = Field(index=True)

    # Bibliographic data
    title: str = Field(sa_type=Text)
    authors: str | None = Field(default=None, sa_type=Text)
    publication_year: int | None = Field(default=None)
    journal: str | None = Field(default=None, sa_type=Text)
    doi: str | None = Field(default=None, max_length=255)
    pmid: str | None = Field(default=None, max_length=32)
    isbn: str | None = Field(default=None, max_length=32)
    url: str | None = Field(default=None, sa_type=Text)

    # Classification
    study_type: str = Field(default=StudyType.ARTICLE.value, max_length=50)
    status: str = Field(default=StudyStatus.PENDING.value, max_length=50)

    # Content
    abstract: str | None = Field(default=None, sa_type=Text)
    keywords: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False),
    )
    full_text: str | None = Field(default=None, sa_type=Text)
    citation: str | None = Field(default=None, sa_type=Text)

    # Screening
    screening_notes: str | None = Field(default=None, sa_type=Text)
    quality_score: int | None = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
