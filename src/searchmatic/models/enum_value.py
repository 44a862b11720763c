"""Persisted enumeration registrations."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.searchmatic.models.base import utc_now


class EnumValue(SQLModel, table=True):
    """A value appended to an enumeration field after the built-in set.

    Rows are only ever inserted. version increases by one for every
    registration across all fields.
    """

    __tablename__ = "enum_values"
    __table_args__ = (UniqueConstraint("field", "value", name="uq_enum_values_field_value"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    field: str = Field(max_length=50, index=True)
    value: str = Field(max_length=50)
    version: int = Field(unique=True)
    created_at: datetime = Field(default_factory=utc_now)
