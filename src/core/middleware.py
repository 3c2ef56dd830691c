"""Middleware for request correlation ID tracking."""

import re
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from core.structured_logging import set_correlation_id


CORRELATION_HEADER = "X-Correlation-ID"

# Caller-supplied ids are echoed into logs and headers; keep them boring.
_VALID_CORRELATION_ID = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")


def _resolve_correlation_id(candidate: str | None) -> str:
    if candidate and _VALID_CORRELATION_ID.match(candidate):
        return candidate
    return str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to every request and response.

    A well-formed `X-Correlation-ID` request header is reused, otherwise a new
    UUID4 is generated. The id is stored in the logging context, on
    `request.state`, and echoed back in the response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = _resolve_correlation_id(
            request.headers.get(CORRELATION_HEADER)
        )
        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
