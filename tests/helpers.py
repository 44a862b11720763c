"""Shared helpers for tests."""

from uuid import UUID

from src.searchmatic.core.security import create_access_token


def auth_headers(owner_id: UUID) -> dict[str, str]:
    """Bearer header for a token whose subject is owner_id."""
    return {"Authorization": f"Bearer {create_access_token(owner_id)}"}
