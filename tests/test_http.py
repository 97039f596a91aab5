from __future__ import annotations

import json
from datetime import date

import pytest
from fastapi.testclient import TestClient

from prompt_planner.interpreter import PromptInterpreter
from prompt_planner.services.http import create_app

from .support import CALENDAR, ScriptedBackend, final, tool_turn

BASE = f"/calendars/{CALENDAR}"


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend([])


@pytest.fixture
def client(context, settings, backend):
    interpreter = PromptInterpreter(backend=backend, settings=settings)
    app = create_app(context, interpreter=interpreter, clock=lambda: date(2026, 1, 15))
    return TestClient(app)


def test_prompt_round_trip(client, backend):
    backend.queue(
        tool_turn(("call_1", "get_next_weekday", {"from_date": "2026-01-15", "weekday": "lundi"})),
        final(
            {
                "interpretation": "Kick-off meeting next Monday.",
                "actions": [
                    {
                        "action": "create",
                        "event": {
                            "title": "Kick-off",
                            "startDate": "2026-01-19",
                            "endDate": "2026-01-19",
                            "eventType": "Meeting",
                        },
                    }
                ],
                "newEventTypes": [{"name": "Meeting", "suggestedColor": "#ff8800"}],
                "warnings": [],
                "questions": [],
            }
        ),
    )

    response = client.post(f"{BASE}/prompts", json={"content": "Kick-off meeting next Monday"})
    assert response.status_code == 200
    body = response.json()
    assert body["result"]["interpretation"] == "Kick-off meeting next Monday."
    assert body["createdCount"] == 1
    assert body["prompt"]["content"] == "Kick-off meeting next Monday"
    created = body["createdEvents"][0]
    assert (created["title"], created["startDate"], created["eventType"]["name"]) == (
        "Kick-off",
        "2026-01-19",
        "Meeting",
    )
    assert [item["name"] for item in body["newEventTypes"]] == ["Meeting"]

    tool_message = backend.calls[1]["messages"][-1]
    assert tool_message["role"] == "tool"
    assert json.loads(tool_message["content"])["date"] == "2026-01-19"
    assert "Today: jeudi 2026-01-15" in backend.calls[0]["system"]

    history = client.get(f"{BASE}/prompts").json()
    assert [item["content"] for item in history] == ["Kick-off meeting next Monday"]


def test_empty_prompt_is_rejected(client, backend):
    response = client.post(f"{BASE}/prompts", json={"content": "   "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Prompt content is required."
    assert backend.calls == []


def test_event_crud(client):
    response = client.post(f"{BASE}/events", json={"title": "Trip", "startDate": "2026-02-02", "endDate": "2026-02-06"})
    assert response.status_code == 201
    event_id = response.json()["id"]

    assert client.post(f"{BASE}/events", json={"title": "No dates"}).status_code == 400

    updated = client.put(f"{BASE}/events/{event_id}", json={"notes": "bring passport"})
    assert updated.status_code == 200
    assert updated.json()["notes"] == "bring passport"
    assert updated.json()["title"] == "Trip"

    assert [item["id"] for item in client.get(f"{BASE}/events").json()] == [event_id]
    assert client.delete(f"{BASE}/events/{event_id}").json() == {"success": True}
    assert client.delete(f"{BASE}/events/{event_id}").status_code == 404
    assert client.get(f"{BASE}/events").json() == []


def test_split_endpoint(client):
    event_id = client.post(
        f"{BASE}/events", json={"title": "Trip", "startDate": "2026-02-02", "endDate": "2026-02-06"}
    ).json()["id"]

    assert client.post(f"{BASE}/events/{event_id}/split", json={}).status_code == 400
    assert client.post(f"{BASE}/events/{event_id}/split", json={"date": "2026-03-01"}).status_code == 400

    body = client.post(f"{BASE}/events/{event_id}/split", json={"date": "2026-02-04", "newTitle": "Rest"}).json()
    assert body["deletedEventId"] == event_id
    assert [(item["title"], item["startDate"], item["endDate"]) for item in body["createdEvents"]] == [
        ("Trip", "2026-02-02", "2026-02-03"),
        ("Rest", "2026-02-04", "2026-02-04"),
        ("Trip", "2026-02-05", "2026-02-06"),
    ]
    assert body["editedEvent"]["title"] == "Rest"


def test_event_types(client):
    response = client.post(f"{BASE}/types", json={"name": "Training", "color": "#ff0000"})
    assert response.status_code == 201
    type_id = response.json()["id"]
    assert client.post(f"{BASE}/types", json={"name": "Training", "color": "#00ff00"}).status_code == 409
    assert client.post(f"{BASE}/types", json={"name": "Nameless"}).status_code == 400

    patched = client.patch(f"{BASE}/types/{type_id}", json={"color": "#123456"}).json()
    assert (patched["name"], patched["color"]) == ("Training", "#123456")
    assert client.delete(f"{BASE}/types/{type_id}").json() == {"success": True}
    assert client.delete(f"{BASE}/types/{type_id}").status_code == 404


def test_undo_and_snapshots(client):
    assert client.post(f"{BASE}/undo").status_code == 400

    created = client.post(f"{BASE}/snapshots", json={"name": "Start"})
    assert created.status_code == 201
    assert created.json()["name"] == "Start"
    unnamed = client.post(f"{BASE}/snapshots")
    assert unnamed.json()["name"] == "Snapshot 15/01/2026"
    assert [item["name"] for item in client.get(f"{BASE}/snapshots").json()] == ["Snapshot 15/01/2026", "Start"]

    client.post(f"{BASE}/events", json={"title": "Later", "startDate": "2026-02-02", "endDate": "2026-02-02"})
    restored = client.post(f"{BASE}/snapshots/{created.json()['id']}/restore").json()
    assert restored["events"] == []
    assert restored["snapshotName"] == "Start"

    undone = client.post(f"{BASE}/undo").json()
    assert undone["tier"] == "local"
    assert [item["title"] for item in undone["currentEvents"]] == ["Later"]

    assert client.post(f"{BASE}/snapshots/state_0404/restore").status_code == 404


def test_synthesis(client, backend):
    backend.queue(
        final(
            {
                "interpretation": "Moved the trip.",
                "actions": [
                    {
                        "action": "create",
                        "event": {"title": "Trip", "startDate": "2026-03-02", "endDate": "2026-03-04"},
                    }
                ],
            }
        ),
    )
    body = client.post(
        f"{BASE}/synthesis",
        json={"currentEvents": [], "synthesisText": "Mars 2026\n- Trip: 2 mars → 4 mars"},
    ).json()
    assert body["interpretation"] == "Moved the trip."
    assert [item["title"] for item in body["events"]] == ["Trip"]
    assert client.post(f"{BASE}/synthesis", json={"currentEvents": []}).status_code == 400


def test_function_catalogue_and_invocation(client):
    functions = client.get("/api/functions").json()["functions"]
    by_name = {item["name"]: item for item in functions}
    assert "get_monday_of_week" in by_name
    assert by_name["get_relative_date"]["parameters"]["properties"]["unit"]["enum"] == ["days", "weeks", "months"]

    response = client.post("/api/functions/get_monday_of_week", json={"arguments": {"date": "2026-01-18"}})
    assert response.json() == {
        "name": "get_monday_of_week",
        "result": {"success": True, "date": "2026-01-12", "dayOfWeek": "lundi"},
    }
    failed = client.post("/api/functions/get_day_of_week", json={"arguments": {"date": "tomorrow"}}).json()
    assert failed["result"]["success"] is False
    assert client.post("/api/functions/nope", json={"arguments": {}}).status_code == 404
