"""Custom application exceptions."""

from collections.abc import Iterable

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Missing or malformed input."""

    def __init__(self, detail: str = "Validation failed", fields: list[str] | None = None) -> None:
        self.fields = fields or []
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidStatus(ValidationError):
    """Requested booking status is not a member of the status enumeration."""

    def __init__(self, value: str | None, valid: Iterable[str]) -> None:
        self.value = value
        super().__init__(
            f"Invalid status. Must be one of: {', '.join(valid)}",
            fields=["status"],
        )


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID {identifier} not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    def __init__(self, detail: str = "You don't have permission to perform this action") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class AlreadyFinalized(AppException):
    """Booking is in a terminal status and cannot change."""

    def __init__(self, current_status: str) -> None:
        self.current_status = current_status
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Booking is already {current_status} and can no longer change status",
        )


class ConflictError(AppException):
    """The record changed since the caller last read it."""

    def __init__(self, detail: str = "Booking was modified by another request") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    def __init__(self, detail: str = "Too many requests. Please try again later.") -> None:
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=detail)


class CollaboratorError(AppException):
    """The hosted database failed or timed out."""

    def __init__(self, detail: str | None = None) -> None:
        message = "Database error"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)
