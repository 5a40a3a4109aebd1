"""Core utilities and security modules."""

from techcare.core.exceptions import (
    AlreadyFinalized,
    AppException,
    AuthenticationError,
    AuthorizationError,
    CollaboratorError,
    ConflictError,
    InvalidStatus,
    NotFoundError,
    ValidationError,
)
from techcare.core.security import create_access_token, role_claim, verify_token

__all__ = [
    "AlreadyFinalized",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "CollaboratorError",
    "ConflictError",
    "InvalidStatus",
    "NotFoundError",
    "ValidationError",
    "create_access_token",
    "role_claim",
    "verify_token",
]
