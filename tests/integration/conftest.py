"""Integration test fixtures for database and HTTP client operations.

Tests run against an in-memory SQLite database created from the model
metadata. Row-level security is PostgreSQL only, so on SQLite ownership is
enforced by the repository predicates and service checks alone, which is
what these tests exercise.
"""

from collections.abc import AsyncGenerator
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from src.searchmatic.api.dependencies import CurrentUserId, get_db_session, get_owner_db_session
from src.searchmatic.core import redis as redis_core
from src.searchmatic.core.db import get_session
from src.searchmatic.main import create_app
from src.searchmatic.models import Project
from src.searchmatic.repositories import EnumValueRepository, ProjectRepository, StudyRepository
from src.searchmatic.services import (
    EnumRegistryService,
    ProjectService,
    StatisticsAggregator,
    StudyService,
    get_enum_registry,
)
from tests.factories import ProjectFactory


@pytest.fixture(autouse=True)
async def _reset_redis_between_tests() -> AsyncGenerator[None]:
    """Drop any Redis client left over from a previous test's event loop."""
    redis_core.reset_redis_state()
    yield
    await redis_core.close_redis()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database per test; StaticPool keeps the single connection alive."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session the services commit through, as a request would."""
    async with get_session(engine=engine) as session:
        yield session


@pytest.fixture
def enum_service(db_session: AsyncSession) -> EnumRegistryService:
    return EnumRegistryService(EnumValueRepository(db_session), db_session, get_enum_registry())


@pytest.fixture
def project_service(db_session: AsyncSession, enum_service: EnumRegistryService) -> ProjectService:
    project_repo = ProjectRepository(db_session)
    stats = StatisticsAggregator(StudyRepository(db_session), project_repo)
    return ProjectService(project_repo, enum_service, stats, db_session)


@pytest.fixture
def study_service(db_session: AsyncSession, enum_service: EnumRegistryService) -> StudyService:
    return StudyService(
        StudyRepository(db_session),
        ProjectRepository(db_session),
        enum_service,
        db_session,
    )


@pytest.fixture
def stats_aggregator(db_session: AsyncSession) -> StatisticsAggregator:
    return StatisticsAggregator(StudyRepository(db_session), ProjectRepository(db_session))


@pytest.fixture
def owner_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_owner_id() -> UUID:
    return uuid4()


@pytest.fixture
async def project(db_session: AsyncSession, owner_id: UUID) -> Project:
    """A committed project owned by owner_id."""
    project = ProjectFactory.build(owner_id=owner_id)
    db_session.add(project)
    await db_session.commit()
    return project


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client whose request sessions use the test database."""
    app = create_app()

    async def _db_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine=engine) as session:
            yield session

    async def _owner_db_session(owner_id: CurrentUserId) -> AsyncGenerator[AsyncSession]:
        async with get_session(owner_id=owner_id, engine=engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _db_session
    app.dependency_overrides[get_owner_db_session] = _owner_db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
