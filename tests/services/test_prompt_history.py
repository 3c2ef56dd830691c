"""Unit tests for the in-memory prompt history."""

from __future__ import annotations

import asyncio
import uuid

import pytest
import pytest_asyncio

from services.enhancement.models import EnhancementRequest
from services.enhancement.orchestrator import PromptEnhancementOrchestrator
from services.history import PromptHistory


@pytest_asyncio.fixture
async def result():
    return await PromptEnhancementOrchestrator(None).enhance(
        EnhancementRequest(input="x")
    )


@pytest.mark.asyncio
async def test_add_returns_entry_with_metadata(result):
    history = PromptHistory()

    entry = await history.add(EnhancementRequest(input="hello", mode="coding"), result)

    assert isinstance(entry.id, uuid.UUID)
    assert entry.original_input == "hello"
    assert entry.mode == "coding"
    assert entry.created_at.tzinfo is not None
    assert entry.result == result
    assert await history.get(entry.id) == entry


@pytest.mark.asyncio
async def test_capacity_evicts_oldest(result):
    history = PromptHistory(capacity=3)

    for i in range(5):
        await history.add(EnhancementRequest(input=f"req-{i}"), result)

    entries = await history.list()
    assert len(history) == 3
    assert [e.original_input for e in entries] == ["req-4", "req-3", "req-2"]


@pytest.mark.asyncio
async def test_list_respects_limit(result):
    history = PromptHistory()
    for i in range(4):
        await history.add(EnhancementRequest(input=f"req-{i}"), result)

    assert len(await history.list(limit=2)) == 2
    assert len(await history.list()) == 4


@pytest.mark.asyncio
async def test_get_unknown_returns_none():
    assert await PromptHistory().get(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_concurrent_adds_are_all_recorded(result):
    history = PromptHistory(capacity=100)

    await asyncio.gather(
        *(history.add(EnhancementRequest(input=f"r{i}"), result) for i in range(50))
    )

    assert len(history) == 50


def test_invalid_capacity():
    with pytest.raises(ValueError):
        PromptHistory(capacity=0)
