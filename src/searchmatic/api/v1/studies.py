"""Study endpoints, nested under projects for listing and creation."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.searchmatic.api.dependencies import CurrentUserId, StudyServiceDep
from src.searchmatic.schemas.study import StudyCreate, StudyRead, StudyUpdate

router = APIRouter(tags=["studies"])

_NOT_FOUND = {404: {"description": "Study or project not found"}}


@router.get(
    "/projects/{project_id}/studies",
    response_model=list[StudyRead],
    summary="List studies",
    responses=_NOT_FOUND,
)
async def list_studies(
    project_id: UUID,
    user_id: CurrentUserId,
    service: StudyServiceDep,
    study_status: Annotated[
        str | None, Query(alias="status", description="Only studies with this status")
    ] = None,
) -> list[StudyRead]:
    studies = await service.list_studies(user_id, project_id, status=study_status)
    return [StudyRead.model_validate(s) for s in studies]


@router.post(
    "/projects/{project_id}/studies",
    response_model=StudyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create study",
    responses={**_NOT_FOUND, 422: {"description": "Invalid field value"}},
)
async def create_study(
    project_id: UUID,
    request: StudyCreate,
    user_id: CurrentUserId,
    service: StudyServiceDep,
) -> StudyRead:
    study = await service.create_study(user_id, project_id, request)
    return StudyRead.model_validate(study)


@router.get(
    "/studies/{study_id}", response_model=StudyRead, summary="Get study", responses=_NOT_FOUND
)
async def get_study(study_id: UUID, user_id: CurrentUserId, service: StudyServiceDep) -> StudyRead:
    study = await service.get_study(user_id, study_id)
    return StudyRead.model_validate(study)


@router.patch(
    "/studies/{study_id}",
    response_model=StudyRead,
    summary="Update study",
    responses={**_NOT_FOUND, 422: {"description": "Invalid field value"}},
)
async def update_study(
    study_id: UUID,
    request: StudyUpdate,
    user_id: CurrentUserId,
    service: StudyServiceDep,
) -> StudyRead:
    study = await service.update_study(user_id, study_id, request)
    return StudyRead.model_validate(study)


@router.delete(
    "/studies/{study_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete study",
    responses=_NOT_FOUND,
)
async def delete_study(study_id: UUID, user_id: CurrentUserId, service: StudyServiceDep) -> None:
    await service.delete_study(user_id, study_id)
