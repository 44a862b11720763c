"""Cursor pagination envelope and cursor encoding."""

import base64
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

CURSOR_SEPARATOR = "|"

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results.

    The cursor is opaque to clients; pass it back unchanged to get the next page.
    """

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for fetching the next page. None if no more pages.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether there are more items after this page.",
    )


def encode_cursor(position: datetime, row_id: UUID) -> str:
    """Encode a (sort key, id) position as a url-safe token."""
    raw = f"{position.isoformat()}{CURSOR_SEPARATOR}{row_id}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Decode a token produced by encode_cursor.

    Raises:
        ValueError: If the cursor is not a valid token
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        position, row_id = raw.split(CURSOR_SEPARATOR, 1)
        return datetime.fromisoformat(position), UUID(row_id)
    except Exception as e:
        raise ValueError("Invalid cursor") from e
