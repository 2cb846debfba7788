"""
HTTP surface tests via FastAPI's TestClient.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.main import app
from app.wiring.dependencies import get_handle_assistant_message_use_case

from conftest import build_harness


def _client():
    harness = build_harness()
    app.dependency_overrides[get_handle_assistant_message_use_case] = lambda: harness.assistant
    return TestClient(app), harness


def test_health():
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_focus_message_blur_cycle():
    client, harness = _client()
    try:
        response = client.post("/assistant/cust_1/focus")
        assert response.status_code == 200
        body = response.json()
        assert body["mode"] is None
        assert body["step"] == "menu"
        assert "What would you like to do?" in body["messages"][0]["text"]

        response = client.post("/assistant/cust_1/messages", json={"text": "1"})
        body = response.json()
        assert body["mode"] == "new"
        assert body["step"] == "chooseProvider"
        assert body["messages"][0]["text"].startswith("Barbers near 94103:")

        response = client.post("/assistant/cust_1/messages", json={"text": "9"})
        assert response.json()["messages"][0]["meta"] == {"error": "OutOfRangeSelection"}

        response = client.get("/assistant/cust_1/session")
        body = response.json()
        assert body["generation"] == 1
        assert [m["sender"] for m in body["messages"]] == ["bot", "user", "bot", "user", "bot"]

        response = client.post("/assistant/cust_1/blur")
        assert response.status_code == 204

        body = client.get("/assistant/cust_1/session").json()
        assert body["step"] == "menu"
        assert body["generation"] == 2
        assert body["messages"] == []
    finally:
        app.dependency_overrides.clear()


def test_full_booking_over_http():
    client, harness = _client()
    try:
        client.post("/assistant/cust_1/focus")
        for text in ("1", "1", "2", "Friday 11:00 AM"):
            client.post("/assistant/cust_1/messages", json={"text": text})
        response = client.post("/assistant/cust_1/messages", json={"text": "yes"})

        body = response.json()
        assert body["messages"][0]["text"] == 'Booked with Marco\'s Cuts for "Beard Trim" at 11:00 AM on 2026-10-16.'
        assert body["mode"] is None
        assert harness.repository.create_calls == 1
    finally:
        app.dependency_overrides.clear()


def test_blank_message_gets_no_reply():
    client, _harness = _client()
    try:
        client.post("/assistant/cust_1/focus")
        response = client.post("/assistant/cust_1/messages", json={"text": "  "})
        assert response.status_code == 200
        assert response.json()["messages"] == []
    finally:
        app.dependency_overrides.clear()
