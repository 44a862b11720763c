"""Verification of identity-provider access tokens.

The identity provider signs HS256 tokens whose ``sub`` claim is the user's
UUID. That value is trusted as owner_id once the signature, expiry and,
when configured, audience check out.
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from src.searchmatic.core.config import get_settings


def create_access_token(subject: str | UUID, expires_delta: timedelta | None = None) -> str:
    """Mint a token shaped like the identity provider's, for local development and tests."""
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)

    claims: dict[str, Any] = {
        "sub": str(subject),
        "role": "authenticated",
        "exp": datetime.now(UTC) + lifetime,
    }
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience

    token: str = jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token


def decode_token(token: str) -> dict[str, Any] | None:
    """Return the verified claims, or None if the token is unusable for any reason."""
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except JWTError:
        return None


def get_owner_id(claims: dict[str, Any]) -> UUID | None:
    """The owner identity carried in ``sub``; None if absent or not a UUID."""
    try:
        return UUID(str(claims["sub"]))
    except (KeyError, ValueError):
        return None
