"""Derived statistics returned by the statistics aggregator."""

from datetime import datetime

from pydantic import BaseModel, Field


class ProjectStats(BaseModel):
    """Study counts for one project, computed from the current study rows."""

    total_studies: int = 0
    pending_studies: int = 0
    included_studies: int = 0
    excluded_studies: int = 0
    last_updated: datetime | None = None


class DashboardStats(BaseModel):
    """Summary across all of an owner's projects."""

    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    average_progress: int = 0


class StudyReviewProgress(BaseModel):
    reviewed: int = 0
    pending: int = 0
    total: int = 0


class ProjectAnalytics(ProjectStats):
    """Project stats with screening rates, as whole percentages."""

    completion_rate: int = 0
    inclusion_rate: int = 0
    study_review_progress: StudyReviewProgress = Field(default_factory=StudyReviewProgress)


class ProgressStudies(BaseModel):
    total: int = 0
    completed: int = 0
    remaining: int = 0


class ProjectProgress(BaseModel):
    """Where a project stands: its recorded progress and its study counts.

    studies.completed counts included and excluded studies; remaining counts
    pending ones.
    """

    percentage: int
    current_stage: str
    status: str
    studies: ProgressStudies
    last_activity: datetime | None = None
