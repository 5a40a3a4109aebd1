"""Global exception handlers.

Every failure leaves the service as ``{"success": false, "error": "..."}``.
"""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from techcare.core.exceptions import AppException

logger = logging.getLogger(__name__)

LOCATION_ROOTS = ("body", "query", "path", "header")


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def _field_name(loc: Sequence[Any]) -> str:
    if loc and loc[0] in LOCATION_ROOTS:
        loc = loc[1:]
    return ".".join(str(part) for part in loc) or "body"


def describe_validation_errors(errors: Sequence[dict[str, Any]]) -> str:
    """Summarise pydantic errors, naming every offending field.

    Blank strings count as missing, matching how clients submit empty forms.
    """
    missing: list[str] = []
    invalid: list[str] = []
    for error in errors:
        field = _field_name(error.get("loc", ()))
        kind = error.get("type")
        if kind == "missing" or (kind == "string_too_short" and error.get("input") == ""):
            missing.append(field)
        elif kind == "extra_forbidden":
            invalid.append(f"{field}: unexpected field")
        else:
            invalid.append(f"{field}: {error.get('msg')}")

    parts = []
    if missing:
        parts.append(f"Missing required fields: {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid fields: {'; '.join(invalid)}")
    return ". ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
        return error_response(exc.status_code, str(exc.detail), exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, describe_validation_errors(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An internal error occurred")
