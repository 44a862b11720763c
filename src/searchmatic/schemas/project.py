"""Project schemas for API request/response.

Title, progress and enum checks live in ProjectService so that direct
service callers get the same errors as HTTP clients.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


def _strip_optional(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    title: str = Field(max_length=500)
    description: str | None = Field(default=None, max_length=5000)
    project_type: str | None = None
    status: str | None = None
    research_domain: str | None = Field(default=None, max_length=500)
    progress_percentage: int = 0
    current_stage: str = Field(default="Planning", max_length=100)
    team_size: int = 1

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()

    @field_validator("description", "research_domain")
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Only fields that are set are applied."""

    title: str | None = Field(default=None, max_length=500)
    description: str | None = Field(default=None, max_length=5000)
    project_type: str | None = None
    status: str | None = None
    research_domain: str | None = Field(default=None, max_length=500)
    progress_percentage: int | None = None
    current_stage: str | None = Field(default=None, max_length=100)
    team_size: int | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None

    @field_validator("description", "research_domain")
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: UUID
    owner_id: UUID
    title: str
    description: str | None
    project_type: str
    status: str
    research_domain: str | None
    progress_percentage: int
    current_stage: str
    team_size: int
    created_at: datetime
    updated_at: datetime
    last_activity_at: datetime

    model_config = {"from_attributes": True}
