"""Error body contract of the global exception handler.

A throwaway app wires the same middleware and handlers as `main` so each
mapping can be triggered directly.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.error_handler import ExceptionNormalizationMiddleware, global_exception_handler
from core.exceptions import InvalidRequestError
from core.middleware import CORRELATION_HEADER, CorrelationIdMiddleware


class Payload(BaseModel):
    label: str = Field(min_length=3)
    count: int = Field(ge=1)


def _build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(ExceptionNormalizationMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    for exc_class in (
        InvalidRequestError,
        RequestValidationError,
        StarletteHTTPException,
        Exception,
    ):
        app.add_exception_handler(exc_class, global_exception_handler)

    @app.post("/payload")
    async def accept(payload: Payload):  # pragma: no cover - executed via client
        return payload

    @app.get("/no-input")
    async def no_input():
        raise InvalidRequestError()

    @app.get("/crash")
    async def crash():
        raise RuntimeError("remote said api_key=should_not_leak")

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(
            status_code=418, detail="Short and stout", headers={"X-Pot": "1"}
        )

    return app


@pytest.fixture
def client_for(monkeypatch) -> Callable[[str], TestClient]:
    """Return a TestClient whose error handler believes it runs in `env`."""

    def factory(env: str) -> TestClient:
        monkeypatch.setattr(
            "core.error_handler.get_settings",
            lambda: type("S", (), {"ENVIRONMENT": env})(),
        )
        return TestClient(_build_app(), raise_server_exceptions=False)

    return factory


def test_invalid_request_is_400_with_bare_error(client_for):
    resp = client_for("development").get("/no-input")

    assert resp.status_code == 400
    assert resp.json() == {"error": "Input is required"}


def test_validation_error_production_has_no_details(client_for):
    resp = client_for("production").post("/payload", json={"label": "ab", "count": 0})

    assert resp.status_code == 422
    assert resp.json() == {"error": "Invalid request body"}


def test_validation_error_development_lists_fields(client_for):
    resp = client_for("development").post("/payload", json={"label": "ab", "count": 0})

    assert resp.status_code == 422
    data = resp.json()
    assert data["error"] == "Invalid request body"
    locations = {tuple(e["loc"]) for e in data["details"]["validation_errors"]}
    assert locations == {("body", "label"), ("body", "count")}


def test_unhandled_error_production_is_opaque(client_for):
    resp = client_for("production").get("/crash")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert "should_not_leak" not in resp.text


def test_unhandled_error_development_has_diagnostics(client_for):
    resp = client_for("development").get("/crash")

    assert resp.status_code == 500
    details = resp.json()["details"]
    assert details["exception_type"] == "RuntimeError"
    assert "Traceback" in details["traceback"]
    assert details["correlation_id"] == resp.headers[CORRELATION_HEADER]


def test_http_exception_keeps_status_detail_and_headers(client_for):
    resp = client_for("production").get("/teapot")

    assert resp.status_code == 418
    assert resp.json() == {"error": "Short and stout"}
    assert resp.headers["X-Pot"] == "1"


def test_unknown_route_is_404(client_for):
    resp = client_for("production").get("/missing")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}
