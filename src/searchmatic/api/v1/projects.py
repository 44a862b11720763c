"""Project endpoints - owner-scoped CRUD, statistics and progress."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.searchmatic.api.dependencies import CurrentUserId, ProjectServiceDep
from src.searchmatic.schemas.pagination import PaginatedResponse
from src.searchmatic.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from src.searchmatic.schemas.stats import (
    DashboardStats,
    ProjectAnalytics,
    ProjectProgress,
    ProjectStats,
)

router = APIRouter(prefix="/projects", tags=["projects"])

_NOT_FOUND = {404: {"description": "Project not found"}}


@router.get(
    "",
    response_model=PaginatedResponse[ProjectRead],
    summary="List projects",
    description="List the caller's projects, most recently active first.",
)
async def list_projects(
    user_id: CurrentUserId,
    service: ProjectServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[ProjectRead]:
    projects, next_cursor, has_more = await service.list_projects(
        user_id, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[ProjectRead.model_validate(p) for p in projects],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        201: {"description": "Project created"},
        422: {"description": "Empty title, out-of-range value or unregistered type/status"},
    },
)
async def create_project(
    request: ProjectCreate,
    user_id: CurrentUserId,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.create_project(user_id, request)
    return ProjectRead.model_validate(project)


@router.get(
    "/dashboard",
    response_model=DashboardStats,
    summary="Dashboard statistics",
    description="Counts and average progress across all of the caller's projects.",
)
async def get_dashboard(user_id: CurrentUserId, service: ProjectServiceDep) -> DashboardStats:
    return await service.get_dashboard_stats(user_id)


@router.get(
    "/{project_id}", response_model=ProjectRead, summary="Get project", responses=_NOT_FOUND
)
async def get_project(
    project_id: UUID,
    user_id: CurrentUserId,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.get_project(user_id, project_id)
    return ProjectRead.model_validate(project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    responses={**_NOT_FOUND, 422: {"description": "Invalid field value"}},
)
async def update_project(
    project_id: UUID,
    request: ProjectUpdate,
    user_id: CurrentUserId,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.update_project(user_id, project_id, request)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Delete a project and all of its studies.",
    responses={**_NOT_FOUND, 409: {"description": "Cascade could not complete; retry"}},
)
async def delete_project(
    project_id: UUID,
    user_id: CurrentUserId,
    service: ProjectServiceDep,
) -> None:
    await service.delete_project(user_id, project_id)


@router.get(
    "/{project_id}/stats",
    response_model=ProjectStats,
    summary="Project statistics",
    responses=_NOT_FOUND,
)
async def get_project_stats(
    project_id: UUID,
    user_id: CurrentUserId,
    service: ProjectServiceDep,
) -> ProjectStats:
    return await service.get_project_stats(user_id, project_id)


@router.get(
    "/{project_id}/analytics",
    response_model=ProjectAnalytics,
    summary="Project analytics",
    description="Study counts with completion and inclusion rates as whole percentages.",
    responses=_NOT_FOUND,
)
async def get_project_analytics(
    project_id: UUID,
    user_id: CurrentUserId,
    service: ProjectServiceDep,
) -> ProjectAnalytics:
    return await service.get_project_analytics(user_id, project_id)


@router.get(
    "/{project_id}/progress",
    response_model=ProjectProgress,
    summary="Project progress",
    responses=_NOT_FOUND,
)
async def get_project_progress(
    project_id: UUID,
    user_id: CurrentUserId,
    service: ProjectServiceDep,
) -> ProjectProgress:
    return await service.get_project_progress(user_id, project_id)


@router.post(
    "/{project_id}/progress",
    response_model=ProjectProgress,
    summary="Recalculate project progress",
    description="Set progress_percentage from the share of studies already included or excluded.",
    responses=_NOT_FOUND,
)
async def update_project_progress(
    project_id: UUID,
    user_id: CurrentUserId,
    service: ProjectServiceDep,
) -> ProjectProgress:
    return await service.update_project_progress(user_id, project_id)
