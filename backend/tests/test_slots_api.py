import pytest
from fastapi.testclient import TestClient

MONDAY = "2026-03-16"
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}


@pytest.fixture
def ids(venue_and_sport):
    venue, sport = venue_and_sport
    return venue.id, sport.id


def test_get_slots_generates_default_day(client: TestClient, ids):
    venue_id, sport_id = ids
    response = client.get(f"/api/venues/{venue_id}/sports/{sport_id}/slots", params={"date": MONDAY})

    assert response.status_code == 200
    data = response.json()
    assert data["generated"] is True
    assert data["warnings"] == []
    assert len(data["slots"]) == 34

    first = data["slots"][0]
    assert first["kind"] == "persisted"
    assert first["id"] is not None
    assert first["start_time"] == "06:00:00"
    assert first["end_time"] == "06:30:00"
    assert first["slot_time"] == "2026-03-16 06:00:00"
    assert first["price"] == 500
    assert first["available"] is True


def test_get_slots_second_call_returns_stored_set(client: TestClient, ids):
    venue_id, sport_id = ids
    url = f"/api/venues/{venue_id}/sports/{sport_id}/slots"
    first = client.get(url, params={"date": MONDAY}).json()
    second = client.get(url, params={"date": MONDAY}).json()

    assert second["generated"] is False
    assert [s["id"] for s in second["slots"]] == [s["id"] for s in first["slots"]]


def test_get_slots_overnight_window(client: TestClient, ids):
    venue_id, sport_id = ids
    client.post(
        f"/api/venues/{venue_id}/operating-hours",
        json={"day_of_week": "monday", "start_time": "22:00:00", "end_time": "02:00:00", "is_morning": False},
        headers=ADMIN,
    )

    slots = client.get(f"/api/venues/{venue_id}/sports/{sport_id}/slots", params={"date": MONDAY}).json()["slots"]
    assert len(slots) == 8
    assert all(s["date"] == MONDAY for s in slots)
    assert slots[-1]["next_day"] is True
    assert slots[-1]["slot_time"] == "2026-03-17 01:30:00"


def test_get_slots_unknown_venue_or_unlinked_sport(client: TestClient, ids):
    venue_id, sport_id = ids
    assert client.get(f"/api/venues/999/sports/{sport_id}/slots", params={"date": MONDAY}).status_code == 404

    other = client.post("/api/sports", json={"name": "Squash"}, headers=ADMIN).json()
    response = client.get(f"/api/venues/{venue_id}/sports/{other['id']}/slots", params={"date": MONDAY})
    assert response.status_code == 404


def test_get_slots_requires_valid_date(client: TestClient, ids):
    venue_id, sport_id = ids
    url = f"/api/venues/{venue_id}/sports/{sport_id}/slots"
    assert client.get(url).status_code == 422
    assert client.get(url, params={"date": "2026-02-30"}).status_code == 422


def test_preview_returns_synthesized_slots(client: TestClient, ids):
    venue_id, sport_id = ids
    response = client.get(f"/api/venues/{venue_id}/sports/{sport_id}/slots/preview", params={"date": MONDAY})

    assert response.status_code == 200
    slots = response.json()
    assert len(slots) == 34
    assert all(s["kind"] == "synthesized" and s["id"] is None for s in slots)

    # Preview never provisions or saves anything
    assert client.get(f"/api/venues/{venue_id}/operating-hours").json() == []


def test_get_slot_by_id(client: TestClient, ids):
    venue_id, sport_id = ids
    slots = client.get(f"/api/venues/{venue_id}/sports/{sport_id}/slots", params={"date": MONDAY}).json()["slots"]

    response = client.get(f"/api/slots/{slots[0]['id']}")
    assert response.status_code == 200
    assert response.json()["start_time"] == "06:00:00"
    assert client.get("/api/slots/99999").status_code == 404
