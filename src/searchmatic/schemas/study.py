"""Study schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

_OPTIONAL_TEXT = (
    "authors",
    "journal",
    "doi",
    "pmid",
    "isbn",
    "url",
    "abstract",
    "full_text",
    "citation",
    "screening_notes",
)


class StudyCreate(BaseModel):
    """Schema for creating a study.

    Ownership is always inherited from the parent project; an owner_id in
    the payload is ignored.
    """

    title: str
    authors: str | None = None
    publication_year: int | None = Field(default=None, ge=1000, le=9999)
    journal: str | None = None
    doi: str | None = Field(default=None, max_length=255)
    pmid: str | None = Field(default=None, max_length=32)
    isbn: str | None = Field(default=None, max_length=32)
    url: str | None = None
    study_type: str | None = None
    status: str | None = None
    abstract: str | None = None
    keywords: list[str] = Field(default_factory=list)
    full_text: str | None = None
    citation: str | None = None
    screening_notes: str | None = None
    quality_score: int | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()

    @field_validator(*_OPTIONAL_TEXT)
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class StudyUpdate(BaseModel):
    """Schema for updating a study. Only fields that are set are applied."""

    title: str | None = None
    authors: str | None = None
    publication_year: int | None = Field(default=None, ge=1000, le=9999)
    journal: str | None = None
    doi: str | None = Field(default=None, max_length=255)
    pmid: str | None = Field(default=None, max_length=32)
    isbn: str | None = Field(default=None, max_length=32)
    url: str | None = None
    study_type: str | None = None
    status: str | None = None
    abstract: str | None = None
    keywords: list[str] | None = None
    full_text: str | None = None
    citation: str | None = None
    screening_notes: str | None = None
    quality_score: int | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None

    @field_validator(*_OPTIONAL_TEXT)
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class StudyRead(BaseModel):
    """Schema for reading a study."""

    id: UUID
    project_id: UUID
    owner_id: UUID
    title: str
    authors: str | None
    publication_year: int | None
    journal: str | None
    doi: str | None
    pmid: str | None
    isbn: str | None
    url: str | None
    study_type: str
    status: str
    abstract: str | None
    keywords: list[str]
    full_text: str | None
    citation: str | None
    screening_notes: str | None
    quality_score: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
