from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from tests.factories import make_event, make_league, make_players

EVENT_DATE = date(2026, 3, 5)


@pytest.fixture
def open_event(session: Session):
    """Event with four confirmed players, attendance still open"""
    league = make_league(session)
    players = make_players(session, [400, 300, 200, 100])
    event = make_event(session, league, EVENT_DATE, {p.id: "confirmed" for p in players})
    return {"league_id": league.id, "event_id": event.id, "ids": [p.id for p in players]}


def test_get_event(open_event, client: TestClient):
    response = client.get(f"/api/events/{open_event['event_id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["league_id"] == open_event["league_id"]
    assert body["event_date"] == "2026-03-05"
    assert body["status"] == "attendance_open"
    assert body["duos_generated"] is False


def test_get_unknown_event(client: TestClient):
    assert client.get("/api/events/999").status_code == 404


def test_draw_sets_duos_generated(open_event, client: TestClient):
    client.post(f"/api/leagues/{open_event['league_id']}/draws", json={"event_date": "2026-03-05"})
    assert client.get(f"/api/events/{open_event['event_id']}").json()["duos_generated"] is True


def test_update_status(open_event, client: TestClient):
    response = client.put(f"/api/events/{open_event['event_id']}/status", json={"status": "in_progress"})

    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"
    assert client.get(f"/api/events/{open_event['event_id']}").json()["status"] == "in_progress"


def test_update_status_validation(open_event, client: TestClient):
    event_id = open_event["event_id"]
    assert client.put(f"/api/events/{event_id}/status", json={"status": "postponed"}).status_code == 422
    assert client.put("/api/events/999/status", json={"status": "in_progress"}).status_code == 404


def test_started_event_cannot_reopen(open_event, client: TestClient):
    event_id = open_event["event_id"]
    client.put(f"/api/events/{event_id}/status", json={"status": "in_progress"})

    response = client.put(f"/api/events/{event_id}/status", json={"status": "attendance_open"})
    assert response.status_code == 409

    moved_on = client.put(f"/api/events/{event_id}/status", json={"status": "scoring_open"})
    assert moved_on.status_code == 200


def test_redraw_locked_after_play_starts(open_event, client: TestClient):
    league_id, event_id = open_event["league_id"], open_event["event_id"]
    draw_id = client.post(f"/api/leagues/{league_id}/draws", json={"event_date": "2026-03-05"}).json()["draw_id"]
    client.put(f"/api/events/{event_id}/status", json={"status": "in_progress"})

    redraw = client.post(f"/api/leagues/{league_id}/draws", json={"event_date": "2026-03-05"})
    assert redraw.status_code == 409
    assert "DRAW_LOCKED" in redraw.json()["detail"]
    assert client.delete(f"/api/draws/{draw_id}").status_code == 409


def test_scoring_follows_event_status(open_event, client: TestClient):
    event_id = open_event["event_id"]
    p1, _, p3, _ = open_event["ids"]
    submission = {"player_id": p1, "victories": 2, "defeats": 0, "blowout_victim_ids": [p3]}

    refused = client.post(f"/api/events/{event_id}/scores", json=submission)
    assert refused.status_code == 409
    assert "SCORING_NOT_ALLOWED" in refused.json()["detail"]
    manual = client.post(f"/api/events/{event_id}/blowouts", json={"applier_ids": [p1], "victim_ids": [p3]})
    assert manual.status_code == 409
    assert client.post(f"/api/events/{event_id}/scores/social").status_code == 409

    client.put(f"/api/events/{event_id}/status", json={"status": "in_progress"})
    accepted = client.post(f"/api/events/{event_id}/scores", json=submission)
    assert accepted.status_code == 200
    assert accepted.json()["score"]["total_points"] == 9.5
