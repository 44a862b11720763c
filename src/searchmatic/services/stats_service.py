"""Statistics aggregation over a project's studies."""

from uuid import UUID

from src.searchmatic.core.cache import get_cached_stats, set_cached_stats
from src.searchmatic.core.logging import get_logger
from src.searchmatic.models import ProjectStatus, StudyStatus
from src.searchmatic.repositories import ProjectRepository, StudyRepository
from src.searchmatic.schemas.stats import (
    DashboardStats,
    ProjectAnalytics,
    ProjectStats,
    StudyReviewProgress,
)

logger = get_logger(__name__)


def round_half_up(numerator: int, denominator: int) -> int:
    """Divide non-negative integers, rounding halves up (2.5 -> 3, not 2)."""
    return (2 * numerator + denominator) // (2 * denominator)


def percent(part: int, whole: int) -> int:
    """part as a whole-number percentage of whole; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part * 100, whole)


def reviewed_studies(stats: ProjectStats) -> int:
    return stats.included_studies + stats.excluded_studies


class StatisticsAggregator:
    """Read-only aggregation; never writes to the record store."""

    def __init__(self, study_repo: StudyRepository, project_repo: ProjectRepository):
        self.study_repo = study_repo
        self.project_repo = project_repo

    async def compute_stats(self, project_id: UUID) -> ProjectStats:
        """Count a project's studies by status.

        Served from the cache when present. The generation is read before
        counting, so a study write that lands in between leaves this result
        under a generation that is no longer read.
        """
        cached, generation = await get_cached_stats(project_id)
        if cached is not None:
            return ProjectStats.model_validate_json(cached)

        counts, last_updated = await self.study_repo.count_by_status(project_id)
        stats = ProjectStats(
            total_studies=sum(counts.values()),
            pending_studies=counts.get(StudyStatus.PENDING.value, 0),
            included_studies=counts.get(StudyStatus.INCLUDED.value, 0),
            excluded_studies=counts.get(StudyStatus.EXCLUDED.value, 0),
            last_updated=last_updated,
        )
        await set_cached_stats(project_id, generation, stats.model_dump_json())
        return stats

    async def compute_analytics(self, project_id: UUID) -> ProjectAnalytics:
        """Stats plus completion and inclusion rates.

        completion_rate is the share of all studies that were included or
        excluded; inclusion_rate is the share of those that were included.
        """
        stats = await self.compute_stats(project_id)
        reviewed = reviewed_studies(stats)
        return ProjectAnalytics(
            **stats.model_dump(),
            completion_rate=percent(reviewed, stats.total_studies),
            inclusion_rate=percent(stats.included_studies, reviewed),
            study_review_progress=StudyReviewProgress(
                reviewed=reviewed,
                pending=stats.pending_studies,
                total=stats.total_studies,
            ),
        )

    async def compute_dashboard(self, owner_id: UUID) -> DashboardStats:
        """Summarize every project the owner has."""
        rows = await self.project_repo.list_progress_for_owner(owner_id)
        if not rows:
            return DashboardStats()
        return DashboardStats(
            total_projects=len(rows),
            active_projects=sum(1 for status, _ in rows if status == ProjectStatus.ACTIVE.value),
            completed_projects=sum(
                1 for status, _ in rows if status == ProjectStatus.COMPLETED.value
            ),
            average_progress=round_half_up(sum(progress for _, progress in rows), len(rows)),
        )
