"""Append-only registry of legal categorical values.

The registry starts from the built-in values in models.enums and grows as
values are registered. Nothing is ever removed or renamed, so every value a
row has ever been written with stays valid.
"""

import re
from functools import lru_cache
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.searchmatic.core.exceptions import ConflictError, InvalidEnumValue, ValidationError
from src.searchmatic.core.logging import get_logger
from src.searchmatic.models import DEFAULT_VALUES, EnumField, EnumValue
from src.searchmatic.models.enums import BUILTIN_VALUES
from src.searchmatic.repositories import EnumValueRepository

logger = get_logger(__name__)

VALUE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_]*$")
MAX_VALUE_LENGTH = 50


def parse_field(field: EnumField | str) -> EnumField:
    """Resolve a field name. Unknown fields are a caller error."""
    try:
        return EnumField(field)
    except ValueError as e:
        raise ValidationError(f"Unknown enumeration field {field!r}") from e


def normalize_value(field: EnumField, value: Any) -> str:
    """Check that value is well formed for registration.

    Raises:
        InvalidEnumValue: If value is empty, too long or not lower snake case
    """
    if not isinstance(value, str):
        raise InvalidEnumValue(field.value, value)
    value = value.strip()
    if not value or len(value) > MAX_VALUE_LENGTH or not VALUE_PATTERN.match(value):
        raise InvalidEnumValue(field.value, value)
    return value


class EnumRegistry:
    """In-process view of the registered values for every field."""

    def __init__(self) -> None:
        self._values: dict[EnumField, list[str]] = {
            field: [member.value for member in members]
            for field, members in BUILTIN_VALUES.items()
        }
        self._version = 0

    @property
    def version(self) -> int:
        """Highest registration version applied; 0 means built-in values only."""
        return self._version

    def is_valid(self, field: EnumField | str, value: Any) -> bool:
        return isinstance(value, str) and value in self._values[parse_field(field)]

    def values(self, field: EnumField | str) -> list[str]:
        return list(self._values[parse_field(field)])

    def default(self, field: EnumField | str) -> str:
        return DEFAULT_VALUES[parse_field(field)]

    def register(self, field: EnumField | str, value: Any, version: int | None = None) -> bool:
        """Append a value. Returns False if it was already registered.

        Args:
            field: Enumeration field
            value: New value; must be lower snake case
            version: Version of a persisted registration. Defaults to the next version.
        """
        parsed = parse_field(field)
        value = normalize_value(parsed, value)
        if value in self._values[parsed]:
            if version is not None:
                self._version = max(self._version, version)
            return False
        self._values[parsed].append(value)
        self._version = max(self._version + 1 if version is None else version, self._version)
        return True

    def snapshot(self) -> dict[str, list[str]]:
        return {field.value: list(values) for field, values in self._values.items()}


@lru_cache
def get_enum_registry() -> EnumRegistry:
    """Process-wide registry singleton."""
    return EnumRegistry()


class EnumRegistryService:
    """Keeps the in-process registry in step with the enum_values table."""

    def __init__(
        self,
        enum_repo: EnumValueRepository,
        session: AsyncSession,
        registry: EnumRegistry,
    ):
        self.enum_repo = enum_repo
        self.session = session
        self.registry = registry

    async def load(self) -> int:
        """Merge persisted registrations into the registry.

        Returns:
            Number of values that were not yet known in this process
        """
        added = 0
        for row in await self.enum_repo.list_all():
            if self.registry.register(row.field, row.value, version=row.version):
                added += 1
        if added:
            logger.info("Enum registry loaded", added=added, version=self.registry.version)
        return added

    async def register(self, field: EnumField | str, value: Any) -> bool:
        """Persist and apply a new value. Registering an existing value is a no-op.

        Returns:
            True if the value was newly registered

        Raises:
            InvalidEnumValue: If value is malformed
            ValidationError: If field is unknown
            ConflictError: If a concurrent registration could not be reconciled
        """
        parsed = parse_field(field)
        value = normalize_value(parsed, value)

        if self.registry.is_valid(parsed, value):
            return False
        if await self.enum_repo.get(parsed.value, value) is not None:
            await self.load()
            return False

        version = max(await self.enum_repo.max_version(), self.registry.version) + 1
        self.enum_repo.add(EnumValue(field=parsed.value, value=value, version=version))
        try:
            await self.session.commit()
        except IntegrityError as e:
            # Another process registered the same value or took this version
            await self.session.rollback()
            await self.load()
            if self.registry.is_valid(parsed, value):
                return False
            raise ConflictError("Concurrent enumeration registration, retry") from e
        except Exception:
            await self.session.rollback()
            raise

        self.registry.register(parsed, value, version=version)
        logger.info("Enum value registered", field=parsed.value, value=value, version=version)
        return True

    async def require(self, field: EnumField | str, value: Any) -> str:
        """Return value if registered, else fail.

        A miss triggers one reload from storage, since another process may have
        registered the value after this one started.

        Raises:
            InvalidEnumValue: If value is not registered for field
        """
        parsed = parse_field(field)
        if self.registry.is_valid(parsed, value):
            return value
        await self.load()
        if self.registry.is_valid(parsed, value):
            return value
        raise InvalidEnumValue(parsed.value, value, self.registry.values(parsed))

    async def resolve(self, field: EnumField | str, value: Any | None) -> str:
        """Return the field default when value is None, else require(value)."""
        if value is None:
            return self.registry.default(field)
        return await self.require(field, value)
