"""Enumeration registry endpoints.

Reading is open to any authenticated caller so clients can discover valid
values. Registering requires the admin key.
"""

from fastapi import APIRouter, status

from src.searchmatic.api.dependencies import CurrentUserId, EnumAdmin, EnumRegistryServiceDep
from src.searchmatic.schemas.enums import (
    EnumRegistryRead,
    EnumValueRegister,
    EnumValueRegistered,
    EnumValuesRead,
)
from src.searchmatic.services.enum_registry import parse_field

router = APIRouter(prefix="/enums", tags=["enums"])


@router.get("", response_model=EnumRegistryRead, summary="List all enumerations")
async def list_enums(
    _user_id: CurrentUserId,
    service: EnumRegistryServiceDep,
) -> EnumRegistryRead:
    await service.load()
    return EnumRegistryRead(version=service.registry.version, fields=service.registry.snapshot())


@router.get(
    "/{field}",
    response_model=EnumValuesRead,
    summary="List values for one field",
    responses={422: {"description": "Unknown field"}},
)
async def get_enum(
    field: str,
    _user_id: CurrentUserId,
    service: EnumRegistryServiceDep,
) -> EnumValuesRead:
    parsed = parse_field(field)
    await service.load()
    return EnumValuesRead(
        field=parsed.value,
        values=service.registry.values(parsed),
        default=service.registry.default(parsed),
        version=service.registry.version,
    )


@router.post(
    "/{field}",
    response_model=EnumValueRegistered,
    status_code=status.HTTP_200_OK,
    summary="Register a value",
    description="Append a value to a field. Registering an existing value is a no-op.",
    dependencies=[EnumAdmin],
    responses={
        403: {"description": "Registration disabled or invalid admin key"},
        422: {"description": "Unknown field or malformed value"},
    },
)
async def register_enum_value(
    field: str,
    request: EnumValueRegister,
    service: EnumRegistryServiceDep,
) -> EnumValueRegistered:
    parsed = parse_field(field)
    created = await service.register(parsed, request.value)
    return EnumValueRegistered(
        field=parsed.value,
        value=request.value.strip(),
        created=created,
        version=service.registry.version,
    )
