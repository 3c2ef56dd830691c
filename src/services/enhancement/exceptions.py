"""Domain exceptions for the remote completion path.

The External Completion Client raises these instead of leaking httpx or JSON
errors; the orchestrator is the only caller that catches them and routes the
request to the deterministic template. Each exception carries a stable
`error_code` for log tagging.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.exceptions import PromptEnhancerError


@dataclass(slots=True, eq=False)
class RemoteUnavailableError(PromptEnhancerError):
    """Base class for remote completion failures."""

    message: str
    error_code: str
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class RemoteNetworkError(RemoteUnavailableError):
    def __init__(self, message: str = "Remote completion service unreachable") -> None:
        super().__init__(message=message, error_code="network_error")


class RemoteStatusError(RemoteUnavailableError):
    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(
            message=message or f"Remote completion service returned {status_code}",
            error_code="http_status",
            status_code=status_code,
        )


class MalformedResponseError(RemoteUnavailableError):
    def __init__(self, message: str = "Unexpected completion response shape") -> None:
        super().__init__(message=message, error_code="malformed_response")


class EmptyStreamError(RemoteUnavailableError):
    def __init__(self, message: str = "Completion stream carried no content") -> None:
        super().__init__(message=message, error_code="empty_stream")
