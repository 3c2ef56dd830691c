"""API response schemas.

This module defines the common API response formats used across the application.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel


# Type variable for generic response types
T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper for the auxiliary endpoints.

    The enhancement endpoints return their payload bare; health and history
    use this envelope.

    Attributes:
        success: Whether the request was successful.
        data: The actual response data (when success is True).
        message: A human-readable message about the response.
    """

    success: bool = True
    data: T | None = None
    message: str = "Operation completed successfully"


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint.

    Attributes:
        error: A human-readable error message.
        details: Diagnostics, only populated outside production.
    """

    error: str
    details: dict[str, Any] | None = None
