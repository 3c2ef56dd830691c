"""Prompt enhancement endpoints (single-shot JSON and SSE stream)."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import aclosing
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from core.config import get_settings
from core.error_handler import INVALID_BODY_MESSAGE
from core.structured_logging import StructuredLogger
from core.exceptions import InvalidRequestError
from schemas.enhancement import (
    CompleteEvent,
    EnhanceRequest,
    EnhancementResult,
    ErrorEvent,
    StreamEvent,
)
from services.enhancement import PromptEnhancementOrchestrator, build_orchestrator
from services.enhancement.models import EnhancementRequest
from services.history import PromptHistory, get_prompt_history


__all__ = [
    "enhance_prompt",
    "enhance_prompt_stream",
    "get_enhancement_orchestrator",
]


structured_logger = StructuredLogger(__name__)

router = APIRouter(tags=["enhance"])

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


@lru_cache
def get_enhancement_orchestrator() -> PromptEnhancementOrchestrator:
    """FastAPI dependency; tests swap it via `app.dependency_overrides`."""
    return build_orchestrator(get_settings())


OrchestratorDep = Annotated[
    PromptEnhancementOrchestrator, Depends(get_enhancement_orchestrator)
]
HistoryDep = Annotated[PromptHistory, Depends(get_prompt_history)]


@router.post(
    "/enhance",
    response_model=EnhancementResult,
    summary="Enhance a prompt",
    description=(
        "Turns free-form input into a structured prompt with a quality score. "
        "Uses the remote model when configured, the local template otherwise."
    ),
)
async def enhance_prompt(
    payload: EnhanceRequest,
    orchestrator: OrchestratorDep,
    history: HistoryDep,
) -> EnhancementResult:
    # Raises InvalidRequestError (400) before any scoring or remote call.
    request = EnhancementRequest.from_body(payload)
    result = await orchestrator.enhance(request)
    await history.add(request, result)
    return result


@router.post(
    "/enhance/stream",
    response_class=StreamingResponse,
    summary="Enhance a prompt with streamed progress",
)
async def enhance_prompt_stream(
    http_request: Request,
    orchestrator: OrchestratorDep,
    history: HistoryDep,
) -> StreamingResponse:
    """Stream status, chunk and one terminal event as Server-Sent Events.

    Chunks concatenate to the final `optimized_prompt`, with one exception.
    If the remote model fails after some fragments were sent, a
    `Using template fallback...` status follows. Clients should discard the
    chunks received so far, because only the template chunks after that
    status make up the final prompt.

    The body is parsed here rather than by FastAPI so that an unparsable body
    still gets an event-stream response carrying a single `error` event.
    """
    raw = await http_request.body()
    try:
        payload = EnhanceRequest.model_validate_json(raw)
    except ValidationError:
        structured_logger.warning("Rejected unparsable stream request body")
        return _event_stream(_single_event(ErrorEvent(error=INVALID_BODY_MESSAGE)))

    try:
        request = EnhancementRequest.from_body(payload)
    except InvalidRequestError as exc:
        return _event_stream(_single_event(ErrorEvent(error=exc.message)))

    async def event_stream() -> AsyncGenerator[str, None]:
        # Closing the response body closes the upstream completion stream.
        async with aclosing(orchestrator.enhance_stream(request)) as events:
            async for event in events:
                if isinstance(event, CompleteEvent):
                    await history.add(request, event.to_result())
                yield event.to_sse()

    return _event_stream(event_stream())


async def _single_event(event: StreamEvent) -> AsyncGenerator[str, None]:
    yield event.to_sse()


def _event_stream(body: AsyncGenerator[str, None]) -> StreamingResponse:
    return StreamingResponse(body, media_type="text/event-stream", headers=SSE_HEADERS)
