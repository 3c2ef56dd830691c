"""Shared test fixtures for pytest.

The environment is pinned before `main` is imported: tests never read a local
.env file, never see a real MiniMax credential and never wait between
synthesized stream tokens.
"""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient


os.environ["ENVIRONMENT"] = "test"
os.environ["MINIMAX_API_KEY"] = ""
os.environ["STREAM_TOKEN_DELAY_SECONDS"] = "0"

from api.v1.enhance import get_enhancement_orchestrator
from main import app
from services.enhancement import PromptEnhancementOrchestrator
from services.history import PromptHistory, get_prompt_history


@pytest.fixture
def history() -> PromptHistory:
    """A fresh, empty history per test."""
    return PromptHistory(capacity=100)


@pytest.fixture
def orchestrator() -> PromptEnhancementOrchestrator:
    """Template-only orchestrator; tests needing the remote path override it."""
    return PromptEnhancementOrchestrator(None, token_delay=0.0)


@pytest.fixture
def app_overrides(
    history: PromptHistory, orchestrator: PromptEnhancementOrchestrator
) -> Generator[dict, None, None]:
    app.dependency_overrides[get_prompt_history] = lambda: history
    app.dependency_overrides[get_enhancement_orchestrator] = lambda: orchestrator
    yield app.dependency_overrides
    app.dependency_overrides.pop(get_prompt_history, None)
    app.dependency_overrides.pop(get_enhancement_orchestrator, None)


@pytest.fixture
def client(app_overrides: dict) -> Generator[TestClient, None, None]:
    """
    Create a test client for the FastAPI application.
    """
    with TestClient(app) as client:
        yield client


@pytest_asyncio.fixture
async def async_client(app_overrides: dict) -> AsyncGenerator[AsyncClient, None]:
    """Async client sharing the same history/orchestrator overrides."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
