"""Authentication dependencies.

The identity provider issues the token; this service only verifies it and
trusts the ``sub`` claim as the owner identity.
"""

import secrets
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.searchmatic.core.config import get_settings
from src.searchmatic.core.logging import bind_user_context
from src.searchmatic.core.security import decode_token, get_owner_id


async def get_current_user_id(
    authorization: Annotated[str | None, Header()] = None,
) -> UUID:
    """Validate the bearer token and return the caller's owner id."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )

    payload = decode_token(authorization[7:])
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    owner_id = get_owner_id(payload)
    if owner_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    bind_user_context(owner_id)
    return owner_id


CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]


async def require_enum_admin(
    x_admin_key: Annotated[str | None, Header()] = None,
) -> None:
    """Guard registry writes with ENUM_ADMIN_API_KEY; disabled when unset."""
    expected = get_settings().enum_admin_api_key
    if expected is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Enumeration registration is disabled",
        )
    if x_admin_key is None or not secrets.compare_digest(x_admin_key, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or missing admin key",
        )


EnumAdmin = Depends(require_enum_admin)
