"""Enumeration registry schemas."""

from pydantic import BaseModel


class EnumValuesRead(BaseModel):
    field: str
    values: list[str]
    default: str
    version: int


class EnumRegistryRead(BaseModel):
    version: int
    fields: dict[str, list[str]]


class EnumValueRegister(BaseModel):
    value: str


class EnumValueRegistered(BaseModel):
    field: str
    value: str
    created: bool
    version: int
