"""In-memory history of recent enhancement results.

Entries live only for the lifetime of the process. The buffer is bounded:
once full, adding a new entry evicts the oldest one.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import deque
from datetime import UTC, datetime
from functools import lru_cache
from uuid import UUID

from core.config import get_settings
from core.structured_logging import StructuredLogger
from schemas.enhancement import EnhancementResult, PromptHistoryEntry
from services.enhancement.models import EnhancementRequest


structured_logger = StructuredLogger(__name__)

DEFAULT_CAPACITY = 100
DEFAULT_LIST_LIMIT = 50


class PromptHistory:
    """Bounded, most-recent-first collection of enhancement results."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._entries: deque[PromptHistoryEntry] = deque(maxlen=capacity)
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    async def add(
        self, request: EnhancementRequest, result: EnhancementResult
    ) -> PromptHistoryEntry:
        entry = PromptHistoryEntry(
            id=uuid.uuid4(),
            original_input=request.input,
            mode=request.mode,
            created_at=datetime.now(UTC),
            result=result,
        )
        async with self._lock:
            # deque(maxlen) drops from the right, i.e. the oldest entry
            self._entries.appendleft(entry)
            size = len(self._entries)
        structured_logger.debug("Recorded enhancement", entry_id=str(entry.id), size=size)
        return entry

    async def list(self, limit: int = DEFAULT_LIST_LIMIT) -> list[PromptHistoryEntry]:
        """Return up to `limit` entries, newest first."""
        async with self._lock:
            return list(self._entries)[: max(limit, 0)]

    async def get(self, entry_id: UUID) -> PromptHistoryEntry | None:
        async with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
        return None

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()


@lru_cache
def get_prompt_history() -> PromptHistory:
    """Process-wide history; FastAPI dependency."""
    return PromptHistory(capacity=get_settings().HISTORY_CAPACITY)
