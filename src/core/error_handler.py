"""Exception-to-response mapping for the PromptEnhancer API.

Every error leaves the service as `{"error": <message>}`. Outside production
an optional `details` object carries diagnostics (correlation id, exception
type, traceback, validation errors) filtered by `security_config`.
"""

import traceback
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from core.config import get_settings
from core.exceptions import InvalidRequestError
from core.security_config import get_allowed_error_fields
from core.structured_logging import StructuredLogger, get_correlation_id
from schemas.api import ErrorResponse


structured_logger = StructuredLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
INVALID_BODY_MESSAGE = "Invalid request body"


def error_response(
    message: str,
    status_code: int,
    *,
    environment: str = "production",
    headers: dict[str, str] | None = None,
    **diagnostics: Any,
) -> JSONResponse:
    """Build an error body, keeping only the diagnostics `environment` allows."""
    allowed = get_allowed_error_fields(environment)
    details = {
        key: value
        for key, value in diagnostics.items()
        if key in allowed and value is not None
    }
    body = ErrorResponse(error=message, details=details or None)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _validation_details(errors: Any) -> list[dict[str, Any]]:
    # Raw error dicts can hold exception objects under `ctx`.
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map any exception onto the shared error body.

    - InvalidRequestError -> 400 with its message and nothing else
    - HTTP exceptions     -> their own status, detail and headers
    - validation errors   -> 422 "Invalid request body"
    - anything else       -> 500 "Internal server error"
    """
    if isinstance(exc, InvalidRequestError):
        structured_logger.info("Rejected invalid request", reason=exc.message)
        return error_response(exc.message, status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else "An error occurred"
        return error_response(
            detail, exc.status_code, headers=getattr(exc, "headers", None)
        )

    environment = get_settings().ENVIRONMENT
    correlation_id = get_correlation_id()

    if isinstance(exc, ValidationError | RequestValidationError):
        errors = _validation_details(exc.errors())
        structured_logger.warning(
            "Request failed validation", path=request.url.path, error_count=len(errors)
        )
        return error_response(
            INVALID_BODY_MESSAGE,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            environment=environment,
            correlation_id=correlation_id,
            validation_errors=errors,
        )

    structured_logger.exception(
        "Unhandled exception",
        path=request.url.path,
        exception_type=type(exc).__name__,
    )
    return error_response(
        INTERNAL_ERROR_MESSAGE,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        environment=environment,
        correlation_id=correlation_id,
        exception_type=type(exc).__name__,
        traceback="".join(traceback.format_exception(exc)).strip(),
    )


class ExceptionNormalizationMiddleware(BaseHTTPMiddleware):
    """Last line of defence: turn anything that escaped the routers into JSON."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001
            return await global_exception_handler(request, exc)
