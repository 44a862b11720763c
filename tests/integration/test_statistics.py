"""Statistics aggregation and its cache."""

from uuid import UUID, uuid4

import pytest
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import AsyncSession

from src.searchmatic.core.cache import get_cached_stats
from src.searchmatic.core.exceptions import NotFound
from src.searchmatic.models import Project
from src.searchmatic.schemas.project import ProjectCreate
from src.searchmatic.schemas.study import StudyCreate, StudyUpdate
from src.searchmatic.services import (
    ProjectService,
    StatisticsAggregator,
    StudyService,
    stats_service,
)
from tests.factories import ProjectFactory, StudyFactory

pytestmark = pytest.mark.integration


class TestComputeStats:
    async def test_counts_by_status(
        self,
        stats_aggregator: StatisticsAggregator,
        db_session: AsyncSession,
        project: Project,
    ) -> None:
        studies = [
            StudyFactory.for_project(project, status="pending"),
            StudyFactory.for_project(project, status="included"),
            StudyFactory.for_project(project, status="excluded"),
            StudyFactory.for_project(project, status="duplicate"),
        ]
        db_session.add_all(studies)
        await db_session.commit()

        stats = await stats_aggregator.compute_stats(project.id)

        assert stats.total_studies == 4
        assert stats.pending_studies == 1
        assert stats.included_studies == 1
        assert stats.excluded_studies == 1
        assert stats.last_updated == max(s.updated_at for s in studies)

    async def test_empty_project(
        self, stats_aggregator: StatisticsAggregator, project: Project
    ) -> None:
        stats = await stats_aggregator.compute_stats(project.id)

        assert stats.total_studies == 0
        assert stats.last_updated is None

    async def test_only_counts_own_project(
        self,
        stats_aggregator: StatisticsAggregator,
        db_session: AsyncSession,
        project: Project,
    ) -> None:
        other = ProjectFactory.build(owner_id=project.owner_id)
        db_session.add(other)
        db_session.add(StudyFactory.for_project(other))
        db_session.add(StudyFactory.for_project(project))
        await db_session.commit()

        assert (await stats_aggregator.compute_stats(project.id)).total_studies == 1


class TestProjectStats:
    async def test_owner_only(
        self, project_service: ProjectService, project: Project, other_owner_id: UUID
    ) -> None:
        with pytest.raises(NotFound):
            await project_service.get_project_stats(other_owner_id, project.id)

    async def test_cache_is_invalidated_by_study_writes(
        self,
        mock_redis: Redis,
        project_service: ProjectService,
        study_service: StudyService,
        project: Project,
        owner_id: UUID,
    ) -> None:
        study = await study_service.create_study(owner_id, project.id, StudyCreate(title="T"))
        first = await project_service.get_project_stats(owner_id, project.id)
        assert first.pending_studies == 1
        assert (await get_cached_stats(project.id))[0] is not None

        await study_service.update_study(owner_id, study.id, StudyUpdate(status="included"))
        assert (await get_cached_stats(project.id))[0] is None

        second = await project_service.get_project_stats(owner_id, project.id)
        assert second.pending_studies == 0
        assert second.included_studies == 1

    async def test_computed_fresh_without_redis(
        self,
        mock_redis_unavailable: None,
        project_service: ProjectService,
        study_service: StudyService,
        project: Project,
        owner_id: UUID,
    ) -> None:
        await study_service.create_study(owner_id, project.id, StudyCreate(title="T"))
        assert (await project_service.get_project_stats(owner_id, project.id)).total_studies == 1

        await study_service.create_study(owner_id, project.id, StudyCreate(title="U"))
        assert (await project_service.get_project_stats(owner_id, project.id)).total_studies == 2


class TestDashboardStats:
    async def test_summary(
        self,
        project_service: ProjectService,
        db_session: AsyncSession,
        owner_id: UUID,
    ) -> None:
        db_session.add_all(
            [
                ProjectFactory.active(owner_id=owner_id, progress_percentage=50),
                ProjectFactory.completed(owner_id=owner_id),
                ProjectFactory.build(owner_id=owner_id, progress_percentage=0),
                ProjectFactory.completed(owner_id=uuid4()),
            ]
        )
        await db_session.commit()

        dashboard = await project_service.get_dashboard_stats(owner_id)

        assert dashboard.total_projects == 3
        assert dashboard.active_projects == 1
        assert dashboard.completed_projects == 1
        assert dashboard.average_progress == 50

    async def test_no_projects(self, project_service: ProjectService) -> None:
        dashboard = await project_service.get_dashboard_stats(uuid4())

        assert dashboard.total_projects == 0
        assert dashboard.average_progress == 0

    async def test_created_projects_count_as_draft(
        self, project_service: ProjectService, owner_id: UUID
    ) -> None:
        await project_service.create_project(owner_id, ProjectCreate(title="T"))

        dashboard = await project_service.get_dashboard_stats(owner_id)

        assert dashboard.total_projects == 1
        assert dashboard.active_projects == 0

    async def test_average_rounds_halves_up(
        self, project_service: ProjectService, db_session: AsyncSession, owner_id: UUID
    ) -> None:
        db_session.add_all(
            [
                ProjectFactory.build(owner_id=owner_id, progress_percentage=0),
                ProjectFactory.build(owner_id=owner_id, progress_percentage=5),
            ]
        )
        await db_session.commit()

        dashboard = await project_service.get_dashboard_stats(owner_id)

        assert dashboard.average_progress == 3


class TestStatsCacheConsistency:
    async def test_study_write_between_count_and_store(
        self,
        mock_redis: Redis,
        project_service: ProjectService,
        study_service: StudyService,
        project: Project,
        owner_id: UUID,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        study = await study_service.create_study(owner_id, project.id, StudyCreate(title="T"))
        store = stats_service.set_cached_stats

        async def _screen_then_store(project_id: UUID, generation: int, payload: str) -> bool:
            await study_service.update_study(owner_id, study.id, StudyUpdate(status="included"))
            return await store(project_id, generation, payload)

        monkeypatch.setattr(stats_service, "set_cached_stats", _screen_then_store)
        counted_before_write = await project_service.get_project_stats(owner_id, project.id)
        assert counted_before_write.pending_studies == 1
        monkeypatch.setattr(stats_service, "set_cached_stats", store)

        stats = await project_service.get_project_stats(owner_id, project.id)

        assert stats.pending_studies == 0
        assert stats.included_studies == 1

    async def test_redis_failure_after_commit_keeps_study(
        self,
        mock_redis: Redis,
        study_service: StudyService,
        project: Project,
        owner_id: UUID,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        project_id = project.id
        incr = mock_redis.incr
        calls = 0

        async def _fail_after_first(*args, **kwargs):
            nonlocal calls
            calls += 1
            if calls > 1:
                raise RedisConnectionError("connection lost")
            return await incr(*args, **kwargs)

        monkeypatch.setattr(mock_redis, "incr", _fail_after_first)

        study = await study_service.create_study(owner_id, project_id, StudyCreate(title="T"))

        studies = await study_service.list_studies(owner_id, project_id)
        assert [s.id for s in studies] == [study.id]

    async def test_redis_failure_before_commit_aborts_write(
        self,
        mock_redis: Redis,
        study_service: StudyService,
        project: Project,
        owner_id: UUID,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        project_id = project.id

        async def _fail(*args, **kwargs):
            raise RedisConnectionError("connection lost")

        monkeypatch.setattr(mock_redis, "incr", _fail)

        with pytest.raises(RedisConnectionError):
            await study_service.create_study(owner_id, project_id, StudyCreate(title="T"))

        assert await study_service.list_studies(owner_id, project_id) == []

    async def test_project_delete_survives_redis_failure_after_commit(
        self,
        mock_redis: Redis,
        project_service: ProjectService,
        project: Project,
        owner_id: UUID,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        project_id = project.id
        incr = mock_redis.incr
        calls = 0

        async def _fail_after_first(*args, **kwargs):
            nonlocal calls
            calls += 1
            if calls > 1:
                raise RedisConnectionError("connection lost")
            return await incr(*args, **kwargs)

        monkeypatch.setattr(mock_redis, "incr", _fail_after_first)

        await project_service.delete_project(owner_id, project_id)

        with pytest.raises(NotFound):
            await project_service.get_project(owner_id, project_id)


class TestProjectAnalytics:
    async def test_rates(
        self,
        project_service: ProjectService,
        db_session: AsyncSession,
        project: Project,
        owner_id: UUID,
    ) -> None:
        db_session.add_all(
            [
                StudyFactory.for_project(project, status="included"),
                StudyFactory.for_project(project, status="excluded"),
                StudyFactory.for_project(project, status="excluded"),
                StudyFactory.for_project(project, status="pending"),
                StudyFactory.for_project(project, status="pending"),
                StudyFactory.for_project(project, status="duplicate"),
            ]
        )
        await db_session.commit()

        analytics = await project_service.get_project_analytics(owner_id, project.id)

        assert analytics.total_studies == 6
        assert analytics.completion_rate == 50
        assert analytics.inclusion_rate == 33
        assert analytics.study_review_progress.reviewed == 3
        assert analytics.study_review_progress.pending == 2
        assert analytics.study_review_progress.total == 6

    async def test_rates_round_halves_up(
        self,
        project_service: ProjectService,
        db_session: AsyncSession,
        project: Project,
        owner_id: UUID,
    ) -> None:
        db_session.add(StudyFactory.for_project(project, status="included"))
        db_session.add_all([StudyFactory.for_project(project) for _ in range(7)])
        await db_session.commit()

        analytics = await project_service.get_project_analytics(owner_id, project.id)

        # 1 of 8 is 12.5%
        assert analytics.completion_rate == 13
        assert analytics.inclusion_rate == 100

    async def test_empty_project(
        self, project_service: ProjectService, project: Project, owner_id: UUID
    ) -> None:
        analytics = await project_service.get_project_analytics(owner_id, project.id)

        assert analytics.completion_rate == 0
        assert analytics.inclusion_rate == 0
        assert analytics.study_review_progress.total == 0

    async def test_owner_only(
        self, project_service: ProjectService, project: Project, other_owner_id: UUID
    ) -> None:
        with pytest.raises(NotFound):
            await project_service.get_project_analytics(other_owner_id, project.id)


class TestProjectProgress:
    async def test_reports_recorded_progress(
        self,
        project_service: ProjectService,
        db_session: AsyncSession,
        project: Project,
        owner_id: UUID,
    ) -> None:
        studies = [
            StudyFactory.for_project(project, status="included"),
            StudyFactory.for_project(project, status="excluded"),
            StudyFactory.for_project(project, status="pending"),
            StudyFactory.for_project(project, status="pending"),
        ]
        db_session.add_all(studies)
        await db_session.commit()

        progress = await project_service.get_project_progress(owner_id, project.id)

        assert progress.percentage == 0
        assert progress.current_stage == "Planning"
        assert progress.status == "draft"
        assert progress.studies.total == 4
        assert progress.studies.completed == 2
        assert progress.studies.remaining == 2
        assert progress.last_activity == max(s.updated_at for s in studies)

    async def test_recalculate_from_studies(
        self,
        project_service: ProjectService,
        db_session: AsyncSession,
        project: Project,
        owner_id: UUID,
    ) -> None:
        before = project.last_activity_at
        db_session.add_all(
            [
                StudyFactory.for_project(project, status="included"),
                StudyFactory.for_project(project, status="duplicate"),
                StudyFactory.for_project(project, status="pending"),
            ]
        )
        await db_session.commit()

        progress = await project_service.update_project_progress(owner_id, project.id)

        assert progress.percentage == 33
        stored = await project_service.get_project(owner_id, project.id)
        assert stored.progress_percentage == 33
        assert stored.last_activity_at >= before

    async def test_recalculate_without_studies_resets_to_zero(
        self, project_service: ProjectService, db_session: AsyncSession, owner_id: UUID
    ) -> None:
        project = ProjectFactory.active(owner_id=owner_id, progress_percentage=40)
        db_session.add(project)
        await db_session.commit()

        progress = await project_service.update_project_progress(owner_id, project.id)

        assert progress.percentage == 0
        assert progress.studies.total == 0

    async def test_owner_only(
        self, project_service: ProjectService, project: Project, other_owner_id: UUID
    ) -> None:
        with pytest.raises(NotFound):
            await project_service.update_project_progress(other_owner_id, project.id)
