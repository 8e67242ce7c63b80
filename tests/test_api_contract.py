from fastapi.testclient import TestClient
from scenario import build_scenario

from flight_timeline.api.server import create_app
from flight_timeline.session import TimelineSession
from flight_timeline.settings import TimelineSettings


def _client() -> TestClient:
    return TestClient(create_app(build_scenario()))


def test_root_and_favicon_endpoints() -> None:
    client = _client()

    root_response = client.get("/")
    assert root_response.status_code == 200
    assert root_response.json()["status"] == "ok"
    assert root_response.json()["docs"] == "/docs"

    favicon_response = client.get("/favicon.ico")
    assert favicon_response.status_code == 204


def test_timeline_state_reports_cursor_and_bounds() -> None:
    body = _client().get("/v1/timeline").json()

    assert body["cursor"] == "2024-10-03T05:46:14Z"
    assert body["start"] == "2024-10-03T05:46:14Z"
    assert body["stop"] == "2025-01-27T04:32:03.7074Z"
    assert body["selected_owner"] == ""
    assert body["animating"] is False


def test_jump_endpoint_moves_cursor() -> None:
    client = _client()

    response = client.post("/v1/timeline/jump", json={"edge": True})
    body = response.json()

    assert response.status_code == 200
    assert body["origin"] == "2024-10-03T05:46:14Z"
    assert body["target"].startswith("2024-10-03T05:46:27.868")
    assert body["clamped"] is False


def test_jump_on_empty_timeline_is_rejected() -> None:
    client = TestClient(create_app(TimelineSession(TimelineSettings())))

    response = client.post("/v1/timeline/jump", json={})

    assert response.status_code == 400


def test_cursor_update_and_tick_resolve_active_clip() -> None:
    client = _client()

    response = client.put("/v1/timeline/cursor", json={"cursor": "2024-10-06T05:22:00Z"})
    assert response.status_code == 200
    assert response.json()["active_clip"] == "ridge.mp4"

    bad = client.put("/v1/timeline/cursor", json={"cursor": "not a time"})
    assert bad.status_code == 400

    tick = client.post("/v1/timeline/tick")
    assert tick.json()["active_clip"] == "ridge.mp4"


def test_key_endpoint_dispatches_bindings() -> None:
    client = _client()

    response = client.post("/v1/timeline/key", json={"key": "End"})
    assert response.status_code == 200
    assert response.json()["cursor"] == "2025-01-27T04:32:03.7074Z"

    unbound = client.post("/v1/timeline/key", json={"key": "F12"})
    assert unbound.status_code == 400


def test_keymap_endpoints_replace_the_bindings() -> None:
    client = _client()

    bindings = client.get("/v1/keymap").json()["bindings"]
    assert bindings["right"] == "jump_forward"
    assert bindings["space"] == "toggle_play"

    replaced = client.put("/v1/keymap", json={"bindings": {"F5": "go_to_end"}})
    assert replaced.status_code == 200
    assert replaced.json()["bindings"] == {"f5": "go_to_end"}

    pressed = client.post("/v1/timeline/key", json={"key": "F5"})
    assert pressed.status_code == 200
    assert pressed.json()["cursor"] == "2025-01-27T04:32:03.7074Z"

    assert client.post("/v1/timeline/key", json={"key": "End"}).status_code == 400


def test_keymap_rejects_unknown_actions() -> None:
    client = _client()

    response = client.put("/v1/keymap", json={"bindings": {"x": "launch"}})

    assert response.status_code == 400
    assert client.get("/v1/keymap").json()["bindings"]["end"] == "go_to_end"


def test_owner_endpoints() -> None:
    session = build_scenario()
    session.registry.ensure("alice")
    client = TestClient(create_app(session))

    owners = client.get("/v1/owners").json()
    assert [owner["key"] for owner in owners] == ["", "alice"]
    assert owners[0]["display_name"] == "Any pilot"
    assert owners[0]["clips"] == 4
    assert owners[0]["selected"] is True

    assert client.post("/v1/owners/next").json()["key"] == "alice"
    assert client.post("/v1/owners/previous").json()["key"] == ""
    assert client.put("/v1/owners/selected", json={"key": "alice"}).json()["selected"] is True
    assert client.put("/v1/owners/selected", json={"key": "nobody"}).status_code == 404


def test_project_endpoint_returns_saved_document() -> None:
    body = _client().get("/v1/project").json()

    assert body["format_version"] == 2
    assert body["tracks"] == []
    assert [clip["filename"] for clip in body["clips"]] == ["launch.mp4", "ridge.mp4", "landing.mp4", "winter.mp4"]
    assert body["clips"][1] == {"filename": "ridge.mp4", "timestamp": "2024-10-06T05:21:58Z", "duration": 5.0}
