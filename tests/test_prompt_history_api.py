"""Tests for the prompt history endpoints."""

from __future__ import annotations

import uuid

from fastapi import status
from fastapi.testclient import TestClient


def _enhance(client: TestClient, text: str, mode: str = "general") -> None:
    resp = client.post("/api/v1/enhance", json={"input": text, "mode": mode})
    assert resp.status_code == status.HTTP_200_OK


def test_history_empty(client: TestClient):
    resp = client.get("/api/v1/prompts/history")

    assert resp.status_code == status.HTTP_200_OK
    body = resp.json()
    assert body["success"] is True
    assert body["data"] == []


def test_history_lists_newest_first(client: TestClient):
    for text in ("first", "second", "third"):
        _enhance(client, text)

    resp = client.get("/api/v1/prompts/history", params={"limit": 2})

    data = resp.json()["data"]
    assert [entry["original_input"] for entry in data] == ["third", "second"]
    assert data[0]["mode"] == "general"
    assert "final_score" in data[0]["result"]["score"]


def test_history_records_trimmed_input_and_mode(client: TestClient):
    _enhance(client, "  padded  ", mode=" ")

    entry = client.get("/api/v1/prompts/history").json()["data"][0]
    assert entry["original_input"] == "padded"
    assert entry["mode"] == "general"


def test_history_limit_out_of_range_rejected(client: TestClient):
    for limit in (0, 101):
        resp = client.get("/api/v1/prompts/history", params={"limit": limit})
        assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_get_prompt_by_id(client: TestClient):
    _enhance(client, "find me")
    entry_id = client.get("/api/v1/prompts/history").json()["data"][0]["id"]

    resp = client.get(f"/api/v1/prompts/{entry_id}")

    assert resp.status_code == status.HTTP_200_OK
    body = resp.json()
    assert body["data"]["id"] == entry_id
    assert body["data"]["original_input"] == "find me"


def test_get_unknown_prompt_returns_404(client: TestClient):
    resp = client.get(f"/api/v1/prompts/{uuid.uuid4()}")

    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json() == {"error": "Prompt not found"}
