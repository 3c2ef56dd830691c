"""Prompt enhancement orchestrator.

Per request: pick the remote or template path, produce the text, score it and
assemble the immutable result. The same pipeline drives both delivery modes:
`enhance` returns the finished result, `enhance_stream` yields status, chunk
and exactly one terminal event.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncGenerator
from contextlib import aclosing

import httpx

from core.config import Settings
from core.error_handler import INTERNAL_ERROR_MESSAGE
from core.structured_logging import StructuredLogger
from core.exceptions import InvalidRequestError
from schemas.enhancement import (
    ChunkEvent,
    CompleteEvent,
    EnhanceRequest,
    EnhancementResult,
    ErrorEvent,
    StatusEvent,
    StreamEvent,
)
from services.enhancement.client import CompletionConfig, MiniMaxCompletionClient
from services.enhancement.exceptions import RemoteUnavailableError
from services.enhancement.interfaces import CompletionClientProtocol
from services.enhancement.models import EnhancementPath, EnhancementRequest
from services.enhancement.prompts import (
    DEFAULT_LOCALE,
    build_system_instruction,
    build_user_message,
)
from services.enhancement.scoring import score
from services.enhancement.template import generate_template


structured_logger = StructuredLogger(__name__)

PIPELINE_STEPS: tuple[str, ...] = (
    "Intent extraction",
    "Domain context enrichment",
    "Structural optimization",
)
TEMPLATE_LABEL = "Template-based (no API key)"
TEMPLATE_FALLBACK_LABEL = "Template-based (remote fallback)"

COMPACT_SEPARATOR = " → "
COMPACT_HEADER_LIMIT = 3

STATUS_ANALYZING = "Analyzing intent..."
STATUS_TEMPLATE = "Generating template..."
STATUS_STREAMING = "Streaming response..."
STATUS_FALLBACK = "Using template fallback..."
STATUS_SCORING = "Calculating quality score..."

_TOKEN_SPLIT = re.compile(r"(\s+)")


def build_compact_version(text: str) -> str:
    """Join the first three header lines, without their `#`, with arrows."""
    headers: list[str] = []
    for line in text.split("\n"):
        stripped = line.lstrip()
        if not stripped.startswith("#"):
            continue
        headers.append(stripped.lstrip("#").strip())
        if len(headers) == COMPACT_HEADER_LIMIT:
            break
    return COMPACT_SEPARATOR.join(headers)


def split_tokens(text: str) -> list[str]:
    """Split into words and the whitespace runs between them.

    Concatenating the tokens gives back `text` exactly.
    """
    return [token for token in _TOKEN_SPLIT.split(text) if token]


class PromptEnhancementOrchestrator:
    """Route each request to the remote model or the deterministic template.

    Without a completion client every request takes the template path and no
    network call is made. With one, any `RemoteUnavailableError` falls back
    to the template; other exceptions propagate (non-streaming) or become a
    terminal error event (streaming).
    """

    def __init__(
        self,
        completion_client: CompletionClientProtocol | None = None,
        *,
        locale: str = DEFAULT_LOCALE,
        token_delay: float = 0.0,
    ) -> None:
        self._client = completion_client
        self._locale = locale
        self._token_delay = token_delay
        self._system_instruction = build_system_instruction(locale)

    @property
    def remote_enabled(self) -> bool:
        return self._client is not None

    # -- non-streaming -----------------------------------------------------

    async def enhance(
        self, body: EnhanceRequest | EnhancementRequest
    ) -> EnhancementResult:
        request = self._validate(body)
        text, path = await self._produce_text(request)
        return self._assemble(text, path)

    async def _produce_text(
        self, request: EnhancementRequest
    ) -> tuple[str, EnhancementPath]:
        if self._client is None:
            structured_logger.debug("No completion credential; using template")
            return self._template(request), EnhancementPath.TEMPLATE
        try:
            text = await self._client.complete(
                self._system_instruction, self._user_message(request)
            )
        except RemoteUnavailableError as exc:
            self._log_fallback(exc)
            return self._template(request), EnhancementPath.TEMPLATE_FALLBACK
        return text, EnhancementPath.REMOTE

    # -- streaming -----------------------------------------------------------

    async def enhance_stream(
        self, body: EnhanceRequest | EnhancementRequest
    ) -> AsyncGenerator[StreamEvent, None]:
        """Yield the event sequence for one request.

        An invalid request yields a single error event. Otherwise at least one
        status event precedes the chunks and the sequence ends with exactly
        one `complete` or `error` event.
        """
        try:
            request = self._validate(body)
        except InvalidRequestError as exc:
            yield ErrorEvent(error=exc.message)
            return

        try:
            async with aclosing(self._stream_events(request)) as events:
                async for event in events:
                    yield event
        except Exception:
            structured_logger.exception("Enhancement stream failed")
            yield ErrorEvent(error=INTERNAL_ERROR_MESSAGE)

    async def _stream_events(
        self, request: EnhancementRequest
    ) -> AsyncGenerator[StreamEvent, None]:
        yield StatusEvent(message=STATUS_ANALYZING)

        if self._client is None:
            yield StatusEvent(message=STATUS_TEMPLATE)
            text = self._template(request)
            path = EnhancementPath.TEMPLATE
            async for chunk in self._synthesize_chunks(text):
                yield chunk
        else:
            yield StatusEvent(message=f"Calling {self._client.model}...")
            fragments: list[str] = []
            try:
                async with aclosing(
                    self._client.complete_streaming(
                        self._system_instruction, self._user_message(request)
                    )
                ) as stream:
                    async for fragment in stream:
                        if not fragments:
                            yield StatusEvent(message=STATUS_STREAMING)
                        fragments.append(fragment)
                        yield ChunkEvent(content=fragment)
                text = "".join(fragments)
                path = EnhancementPath.REMOTE
            except RemoteUnavailableError as exc:
                self._log_fallback(exc, fragments_discarded=len(fragments))
                # Tells the collaborator to discard any partial remote text.
                yield StatusEvent(message=STATUS_FALLBACK)
                text = self._template(request)
                path = EnhancementPath.TEMPLATE_FALLBACK
                async for chunk in self._synthesize_chunks(text):
                    yield chunk

        yield StatusEvent(message=STATUS_SCORING)
        yield CompleteEvent.from_result(self._assemble(text, path))

    async def _synthesize_chunks(self, text: str) -> AsyncGenerator[ChunkEvent, None]:
        for token in split_tokens(text):
            yield ChunkEvent(content=token)
            if self._token_delay:
                await asyncio.sleep(self._token_delay)

    # -- shared ----------------------------------------------------------------

    def _validate(self, body: EnhanceRequest | EnhancementRequest) -> EnhancementRequest:
        if isinstance(body, EnhancementRequest):
            request = body
        else:
            request = EnhancementRequest.from_body(body)
        structured_logger.info(
            "Enhancement requested",
            input_length=len(request.input),
            mode=request.mode,
            remote_enabled=self.remote_enabled,
        )
        return request

    def _template(self, request: EnhancementRequest) -> str:
        return generate_template(request.input, request.mode, self._locale)

    def _user_message(self, request: EnhancementRequest) -> str:
        return build_user_message(request.input, request.mode, self._locale)

    def _path_label(self, path: EnhancementPath) -> str:
        if path is EnhancementPath.REMOTE and self._client is not None:
            return f"{self._client.model} enhancement"
        if path is EnhancementPath.TEMPLATE_FALLBACK:
            return TEMPLATE_FALLBACK_LABEL
        return TEMPLATE_LABEL

    def _assemble(self, text: str, path: EnhancementPath) -> EnhancementResult:
        quality = score(text)
        improvements = (
            *PIPELINE_STEPS,
            f"Quality scoring ({quality.final_score:.1f})",
            self._path_label(path),
        )
        structured_logger.info(
            "Enhancement complete",
            path=path.value,
            final_score=quality.final_score,
            output_length=len(text),
        )
        return EnhancementResult(
            optimized_prompt=text,
            improvements_applied=improvements,
            score=quality,
            compact_version=build_compact_version(text),
        )

    def _log_fallback(self, exc: RemoteUnavailableError, **extra: object) -> None:
        structured_logger.warning(
            "Remote completion unavailable; falling back to template",
            error_code=exc.error_code,
            status_code=exc.status_code,
            **extra,
        )


def build_orchestrator(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PromptEnhancementOrchestrator:
    """Wire an orchestrator from settings; no client without a credential."""
    config = CompletionConfig.from_settings(settings)
    client = MiniMaxCompletionClient(config, transport) if config.is_configured else None
    return PromptEnhancementOrchestrator(
        client,
        locale=settings.PROMPT_LOCALE,
        token_delay=settings.STREAM_TOKEN_DELAY_SECONDS,
    )
