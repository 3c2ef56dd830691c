"""Domain models for the enhancement orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from core.exceptions import InvalidRequestError
from schemas.enhancement import DEFAULT_MODE, EnhanceRequest


class EnhancementPath(StrEnum):
    """Which producer generated the optimized prompt."""

    REMOTE = "remote"
    TEMPLATE = "template"  # no credential configured
    TEMPLATE_FALLBACK = "template_fallback"  # remote call failed


@dataclass(frozen=True, slots=True)
class EnhancementRequest:
    """Validated request: trimmed, non-empty input and a non-blank mode."""

    input: str
    mode: str = DEFAULT_MODE

    @classmethod
    def from_body(cls, body: EnhanceRequest) -> EnhancementRequest:
        """Validate a request body, raising InvalidRequestError on empty input."""
        text = (body.input or "").strip()
        if not text:
            raise InvalidRequestError("Input is required")
        mode = (body.mode or "").strip() or DEFAULT_MODE
        return cls(input=text, mode=mode)
