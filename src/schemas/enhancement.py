"""Schemas for prompt enhancement requests, results and stream events."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field


DEFAULT_MODE = "general"


class EnhanceRequest(BaseModel):
    """Request body shared by the enhance and enhance-stream endpoints.

    `input` is optional at the schema level so that a missing value is
    reported as "Input is required" rather than a generic validation error.
    """

    input: str | None = Field(None, description="Free-form request to enhance")
    mode: str | None = Field(
        DEFAULT_MODE, description="Open label such as general, coding, marketing"
    )


class QualityScore(BaseModel):
    """Five heuristic sub-scores; `final_score` is always their mean."""

    model_config = ConfigDict(frozen=True)

    clarity: float
    specificity: float
    executability: float
    ambiguity_control: float
    structure: float

    @computed_field  # type: ignore[prop-decorator]
    @property
    def final_score(self) -> float:
        return (
            self.clarity
            + self.specificity
            + self.executability
            + self.ambiguity_control
            + self.structure
        ) / 5


class EnhancementResult(BaseModel):
    """Outcome of a single enhancement; immutable once built."""

    model_config = ConfigDict(frozen=True)

    optimized_prompt: str
    improvements_applied: tuple[str, ...]
    score: QualityScore
    compact_version: str


# --- Streaming events ------------------------------------------------------


class _StreamEventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json()}\n\n"


class StatusEvent(_StreamEventBase):
    type: Literal["status"] = "status"
    message: str


class ChunkEvent(_StreamEventBase):
    type: Literal["chunk"] = "chunk"
    content: str


class CompleteEvent(_StreamEventBase):
    type: Literal["complete"] = "complete"
    optimized_prompt: str
    improvements_applied: tuple[str, ...]
    score: QualityScore
    compact_version: str

    @classmethod
    def from_result(cls, result: EnhancementResult) -> CompleteEvent:
        return cls(
            optimized_prompt=result.optimized_prompt,
            improvements_applied=result.improvements_applied,
            score=result.score,
            compact_version=result.compact_version,
        )

    def to_result(self) -> EnhancementResult:
        return EnhancementResult(
            optimized_prompt=self.optimized_prompt,
            improvements_applied=self.improvements_applied,
            score=self.score,
            compact_version=self.compact_version,
        )


class ErrorEvent(_StreamEventBase):
    type: Literal["error"] = "error"
    error: str


StreamEvent = Annotated[
    StatusEvent | ChunkEvent | CompleteEvent | ErrorEvent,
    Field(discriminator="type"),
]

TERMINAL_EVENT_TYPES = frozenset({"complete", "error"})


# --- History ----------------------------------------------------------------


class PromptHistoryEntry(BaseModel):
    """A recorded enhancement as exposed by the history endpoints."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    original_input: str
    mode: str
    created_at: datetime
    result: EnhancementResult
