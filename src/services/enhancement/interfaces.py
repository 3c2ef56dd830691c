"""Service interfaces for prompt enhancement.

Protocols keep the orchestrator independent of the concrete HTTP client so
tests can inject fakes without patching module globals.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Protocol


class CompletionClientProtocol(Protocol):
    """Protocol for the remote chat-completion client."""

    @property
    def model(self) -> str:
        """Model identifier, used in the remote-path improvement label."""
        ...

    async def complete(self, system_instruction: str, user_message: str) -> str:
        """Return the whole completion or raise `RemoteUnavailableError`."""
        ...

    def complete_streaming(
        self, system_instruction: str, user_message: str
    ) -> AsyncGenerator[str, None]:
        """Return an async generator of content fragments.

        Implementations should be async generator functions so that calling
        this method returns the iterator directly. Failures surface as
        `RemoteUnavailableError` while iterating.
        """
        ...
