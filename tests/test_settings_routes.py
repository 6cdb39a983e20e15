"""Tests for event settings routes."""

from fastapi.testclient import TestClient


def test_defaults_created_on_first_read(client: TestClient):
    response = client.get("/api/settings")

    assert response.status_code == 200
    data = response.json()
    assert data["event_date"] == "2024-09-27"
    assert data["event_time"] == "5:00 PM - 10:00 PM"
    assert data["venue"] == "Pickleball HQ, New Jersey"
    assert data["max_participants"] == 64
    assert data["registration_open"] is True


def test_repeated_reads_return_same_row(client: TestClient):
    first = client.get("/api/settings").json()
    second = client.get("/api/settings").json()

    assert first["id"] == second["id"]


def test_partial_update_keeps_other_fields(client: TestClient, admin_headers: dict):
    response = client.put(
        "/api/settings",
        json={"venue": "Community Courts", "max_participants": "80"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["venue"] == "Community Courts"
    assert data["max_participants"] == 80
    assert data["event_date"] == "2024-09-27"

    assert client.get("/api/settings").json()["venue"] == "Community Courts"


def test_update_event_date_and_registration(client: TestClient, admin_headers: dict):
    response = client.put(
        "/api/settings",
        json={"event_date": "2025-10-04", "registration_open": "false"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["event_date"] == "2025-10-04"
    assert response.json()["registration_open"] is False


def test_impossible_date_rejected(client: TestClient, admin_headers: dict):
    response = client.put("/api/settings", json={"event_date": "2025-02-30"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid date"


def test_max_participants_bounds(client: TestClient, admin_headers: dict):
    response = client.put("/api/settings", json={"max_participants": 0}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Number must be between 1 and 10000"


def test_empty_update_rejected(client: TestClient, admin_headers: dict):
    response = client.put("/api/settings", json={}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "No updatable fields provided"


def test_update_requires_admin_key(client: TestClient):
    assert client.put("/api/settings", json={"venue": "x"}).status_code == 403


def test_eleventh_update_is_throttled(client: TestClient, admin_headers: dict):
    for i in range(10):
        response = client.put("/api/settings", json={"max_participants": 50 + i}, headers=admin_headers)
        assert response.status_code == 200

    response = client.put("/api/settings", json={"max_participants": 99}, headers=admin_headers)

    assert response.status_code == 429
    assert response.json()["error"] == "Too many settings update attempts. Please try again later."
    assert client.get("/api/settings").json()["max_participants"] == 59
