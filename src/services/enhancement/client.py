"""External completion client for the MiniMax chat completion API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Any

import httpx

from core.config import Settings
from core.structured_logging import StructuredLogger
from services.enhancement.exceptions import (
    EmptyStreamError,
    MalformedResponseError,
    RemoteNetworkError,
    RemoteStatusError,
)


logger = logging.getLogger(__name__)
structured_logger = StructuredLogger(__name__)

CHAT_COMPLETION_PATH = "/text/chatcompletion_v2"
# Fixed so the output format stays predictable; not user-configurable.
TEMPERATURE = 0.7
MAX_TOKENS = 4096

SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"


@dataclass(frozen=True)
class CompletionConfig:
    api_key: str | None
    base_url: str = "https://api.minimax.io/v1"
    model: str = "MiniMax-M2.1"
    group_id: str | None = None
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> CompletionConfig:
        return cls(
            api_key=settings.MINIMAX_API_KEY,
            base_url=settings.MINIMAX_BASE_URL,
            model=settings.MINIMAX_MODEL,
            group_id=settings.MINIMAX_GROUP_ID,
            timeout_seconds=settings.MINIMAX_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}{CHAT_COMPLETION_PATH}"

    @property
    def query_params(self) -> dict[str, str]:
        if self.group_id and self.group_id.strip():
            return {"GroupId": self.group_id.strip()}
        return {}


class MiniMaxCompletionClient:
    """Send a system instruction plus a user message to the remote model.

    One outbound call per invocation, no retries. Every failure surfaces as a
    `RemoteUnavailableError` subclass. `transport` exists so tests can plug in
    `httpx.MockTransport`.
    """

    def __init__(
        self,
        config: CompletionConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def model(self) -> str:
        return self._config.model

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout_seconds, transport=self._transport
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {(self._config.api_key or '').strip()}",
        }

    def build_payload(
        self, system_instruction: str, user_message: str, *, stream: bool = False
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_message},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        if stream:
            payload["stream"] = True
        return payload

    async def complete(self, system_instruction: str, user_message: str) -> str:
        """Return the full completion text.

        `timeout_seconds` bounds the whole call, not only each connect or
        read phase.
        """
        payload = self.build_payload(system_instruction, user_message)
        try:
            async with (
                asyncio.timeout(self._config.timeout_seconds),
                self._http_client() as client,
            ):
                response = await client.post(
                    self._config.endpoint,
                    params=self._config.query_params,
                    headers=self._headers(),
                    json=payload,
                )
        except (httpx.HTTPError, httpx.InvalidURL, TimeoutError) as exc:
            structured_logger.warning(
                "Remote completion request failed",
                error_type=type(exc).__name__,
            )
            raise RemoteNetworkError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            structured_logger.warning(
                "Remote completion returned error status",
                status_code=response.status_code,
            )
            raise RemoteStatusError(response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Completion response is not JSON") from exc
        return _extract_message_content(body)

    async def complete_streaming(
        self, system_instruction: str, user_message: str
    ) -> AsyncGenerator[str, None]:
        """Yield content fragments in arrival order.

        The HTTP response lives inside this generator's `async with` blocks,
        so closing or cancelling the consumer releases the connection.
        Here `timeout_seconds` bounds each connect and each read between
        frames. A long generation that keeps sending frames is not cut off.
        """
        payload = self.build_payload(system_instruction, user_message, stream=True)
        emitted = 0
        try:
            async with (
                self._http_client() as client,
                client.stream(
                    "POST",
                    self._config.endpoint,
                    params=self._config.query_params,
                    headers=self._headers(),
                    json=payload,
                ) as response,
            ):
                if not response.is_success:
                    await response.aread()
                    structured_logger.warning(
                        "Remote completion stream returned error status",
                        status_code=response.status_code,
                    )
                    raise RemoteStatusError(response.status_code)

                async for line in response.aiter_lines():
                    frame = parse_sse_line(line)
                    if frame is None:
                        continue
                    if frame.done:
                        break
                    emitted += 1
                    yield frame.content
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            structured_logger.warning(
                "Remote completion stream failed",
                error_type=type(exc).__name__,
                fragments_emitted=emitted,
            )
            raise RemoteNetworkError(str(exc) or type(exc).__name__) from exc

        if emitted == 0:
            raise EmptyStreamError()


@dataclass(frozen=True)
class StreamFrame:
    """One decoded `data:` line: a content fragment or the end sentinel."""

    content: str | None = None
    done: bool = False


def parse_sse_line(line: str) -> StreamFrame | None:
    """Decode one line of a streamed completion body.

    Returns None for anything that should be skipped: blank lines, comments,
    malformed JSON and frames without delta content.
    """
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    data = line[len(SSE_DATA_PREFIX) :].strip()
    if data == SSE_DONE_SENTINEL:
        return StreamFrame(done=True)
    if not data:
        return None
    try:
        parsed = json.loads(data)
        content = parsed["choices"][0]["delta"]["content"]
    except (json.JSONDecodeError, KeyError, IndexError, TypeError):
        logger.debug("Skipping malformed completion frame")
        return None
    if not isinstance(content, str) or not content:
        return None
    return StreamFrame(content=content)


def _extract_message_content(body: Any) -> str:
    try:
        base_resp = body.get("base_resp") or {}
        provider_status = base_resp.get("status_code", 0)
        if provider_status:
            raise MalformedResponseError(
                f"Provider error {provider_status}: {base_resp.get('status_msg', '')}"
            )
        content = body["choices"][0]["message"]["content"]
    except (AttributeError, KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError() from exc
    if not isinstance(content, str) or not content.strip():
        raise MalformedResponseError("Completion response has no content")
    return content
