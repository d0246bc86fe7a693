"""Tests for the chat and state endpoints."""

import uuid

import pytest
from fastapi.testclient import TestClient

from trip_assistant.main import app

TURNS = [
    "I want to go to Greece for 3 days with €1500 budget for 2 people",
    "Manchester",
    "September",
    "boutique",
    "seafood",
    "history",
    "balanced",
]


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def session_id() -> str:
    return f"test-{uuid.uuid4()}"


def test_root_and_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").json()["docs"] == "/docs"


def test_chat_returns_message_and_phase(client: TestClient, session_id: str) -> None:
    response = client.post("/chat", json={"session_id": session_id, "user_message": "Hi"})

    assert response.status_code == 200
    data = response.json()
    assert data["session_id"] == session_id
    assert data["phase"] == "collecting"
    assert "Where would you like to go?" in data["assistant_message"]


def test_chat_requires_fields(client: TestClient) -> None:
    response = client.post("/chat", json={"session_id": "x"})

    assert response.status_code == 422


def test_state_snapshot_tracks_the_conversation(client: TestClient, session_id: str) -> None:
    client.post("/chat", json={"session_id": session_id, "user_message": TURNS[0]})

    snapshot = client.get(f"/state/{session_id}").json()

    assert snapshot["phase"] == "collecting"
    assert snapshot["slots"]["destination"] == "Greece"
    assert snapshot["slots"]["duration_days"] == 3
    assert snapshot["budget_currency"] == "EUR"
    assert snapshot["answered"]["travelers"] is True
    assert snapshot["answered"]["departure_location"] is False
    assert snapshot["has_asked_for_confirmation"] is False
    assert snapshot["itinerary"] is None


def test_confirmation_gate_and_generation(client: TestClient, session_id: str) -> None:
    for message in TURNS:
        last = client.post("/chat", json={"session_id": session_id, "user_message": message}).json()

    assert last["phase"] == "confirming"
    assert "Shall I create your itinerary" in last["assistant_message"]

    declined = client.post("/chat", json={"session_id": session_id, "user_message": "no, more info"}).json()
    assert declined["phase"] == "collecting"
    snapshot = client.get(f"/state/{session_id}").json()
    assert snapshot["slots"]["destination"] == "Greece"
    assert snapshot["has_asked_for_confirmation"] is False

    again = client.post("/chat", json={"session_id": session_id, "user_message": "add museums"}).json()
    assert again["phase"] == "confirming"

    done = client.post("/chat", json={"session_id": session_id, "user_message": "yes"}).json()
    assert done["phase"] == "done"
    assert "Day 3" in done["assistant_message"]

    snapshot = client.get(f"/state/{session_id}").json()
    assert len(snapshot["itinerary"]["days"]) == 3
    assert snapshot["itinerary"]["budget_breakdown"]["flights"] == 25


def test_delete_resets_the_session(client: TestClient, session_id: str) -> None:
    client.post("/chat", json={"session_id": session_id, "user_message": "Japan"})

    response = client.delete(f"/state/{session_id}")

    assert response.status_code == 200
    assert response.json()["slots"]["destination"] is None
    assert response.json()["turn_count"] == 0
