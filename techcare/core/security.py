"""Access token verification for tokens issued by the hosted auth service."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from techcare.config import settings
from techcare.core.exceptions import AuthenticationError


def create_access_token(
    user_id: str,
    role: str | None = None,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create an access token shaped like the ones the auth service issues.

    The role is placed in ``app_metadata`` the same way the hosted service
    exposes custom claims. Used by scripts and tests.
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode: dict[str, Any] = {
        "sub": user_id,
        "aud": settings.jwt_audience,
        "role": "authenticated",
        "exp": expire,
    }
    if email:
        to_encode["email"] = email
    if role:
        to_encode["app_metadata"] = {"role": role}
    return jwt.encode(to_encode, settings.supabase_jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode an access token."""
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")
    if not payload.get("sub"):
        raise AuthenticationError("Invalid token payload")
    return payload


def role_claim(payload: dict[str, Any]) -> str | None:
    """Extract the application role from token claims, if present.

    The top-level ``role`` claim holds the database role (``authenticated``)
    and is not the application role.
    """
    for container in ("app_metadata", "user_metadata"):
        metadata = payload.get(container) or {}
        if isinstance(metadata, dict) and metadata.get("role"):
            return str(metadata["role"])
    user_role = payload.get("user_role")
    return str(user_role) if user_role else None
