import os

import pytest
import requests
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite://")

from faithverse.core.deps import get_clock, get_store  # noqa: E402
from faithverse.main import app  # noqa: E402
from faithverse.sync.client import CloudSyncClient  # noqa: E402


@pytest.fixture
def client(store, clock):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _create(client, username="alice"):
    resp = client.post("/profiles", json={"username": username, "displayName": username.title()})
    assert resp.status_code == 201
    return resp.json()


def test_create_profile_returns_camel_case(client):
    body = _create(client)
    assert body["displayName"] == "Alice"
    assert body["level"] == 1
    assert "joinedAt" in body

    assert client.get("/profiles/current").json()["id"] == body["id"]


def test_duplicate_username_is_400(client):
    _create(client)
    resp = client.post("/profiles", json={"username": "Alice"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Username already taken"


def test_unknown_profile_is_404(client):
    assert client.get("/profiles/user_missing").status_code == 404
    assert client.get("/daily/user_missing").status_code == 404
    assert client.post("/profiles/sign-in", json={"username": "ghost"}).status_code == 404


def test_protected_update_is_400(client):
    profile = _create(client)
    resp = client.patch(f"/profiles/{profile['id']}", json={"xp": 1000})
    assert resp.status_code == 400

    resp = client.patch(f"/profiles/{profile['id']}", json={"preferences": {"theme": "dark"}})
    assert resp.status_code == 200
    assert resp.json()["preferences"]["theme"] == "dark"


def test_record_score_grants_xp_and_achievement(client):
    profile = _create(client)
    resp = client.post("/scores", json={"profileId": profile["id"], "moduleType": "quiz", "score": 110})
    assert resp.status_code == 201

    body = resp.json()
    assert body["event"]["xpGranted"] == 110
    assert body["profile"]["level"] == 2
    assert body["leveledUp"] is True
    assert body["newAchievements"] == ["first_game"]
    assert "first_game" in body["profile"]["achievements"]

    best = client.get(f"/scores/{profile['id']}/best/quiz")
    assert best.json()["score"] == 110
    assert client.get(f"/scores/{profile['id']}/best/memory").status_code == 404


def test_score_for_unknown_profile_is_404(client):
    resp = client.post("/scores", json={"profileId": "user_missing", "moduleType": "quiz", "score": 1})
    assert resp.status_code == 404


def test_story_ending_counts_finished_story(client):
    profile = _create(client)
    client.post(f"/stories/{profile['id']}/moses/choice", json={"score": 5})
    resp = client.post(f"/stories/{profile['id']}/moses/choice", json={"score": 5, "ending": True})
    assert resp.json()["completed"] is True

    current = client.get(f"/profiles/{profile['id']}").json()
    assert current["stats"]["storiesFinished"] == 1
    assert "story_finished" in current["achievements"]


def test_daily_quiz_and_verse(client):
    profile = _create(client)
    pid = profile["id"]

    resp = client.post(f"/daily/{pid}/quiz", json={"passed": True})
    assert resp.json()["streak"]["current"] == 1
    assert client.get(f"/daily/{pid}/streak").json()["current"] == 1

    resp = client.post(f"/daily/{pid}/verse", json={"completed": True, "memorized": True})
    assert resp.json()["memorized"] is True

    stats = client.get(f"/profiles/{pid}").json()["stats"]
    assert stats["streakDays"] == 1
    assert stats["versesMemorized"] == 1

    challenges = {c["id"]: c for c in client.get(f"/daily/{pid}").json()["challenges"]}
    assert challenges["daily_verse"]["completed"] is True
    assert challenges["quiz_streak"]["current"] == 1


def test_leaderboard_sort_param(client):
    alice = _create(client, "alice")
    _create(client, "bob")
    client.post("/scores", json={"profileId": alice["id"], "moduleType": "memory", "score": 40})

    view = client.get("/api/leaderboard", params={"sort": "totalScore", "limit": 1}).json()
    assert view["kind"] == "live"
    assert [e["username"] for e in view["entries"]] == ["alice"]
    assert client.get("/api/leaderboard", params={"sort": "nope"}).status_code == 422


def test_export_then_import_conflicts_on_username(client):
    profile = _create(client)
    exported = client.get(f"/api/export/{profile['id']}")
    assert exported.status_code == 200
    assert "attachment" in exported.headers["content-disposition"]

    resp = client.post("/api/import", json=exported.json())
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Username already taken"

    client.delete(f"/profiles/{profile['id']}")
    resp = client.post("/api/import", json=exported.json())
    assert resp.status_code == 201
    assert resp.json()["previousId"] == profile["id"]


def test_import_malformed_is_400(client):
    resp = client.post("/api/import", json={"schemaVersion": "1.0"})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Import failed")


def test_reset_and_delete(client):
    profile = _create(client)
    client.post("/scores", json={"profileId": profile["id"], "moduleType": "quiz", "score": 50})

    resp = client.post(f"/profiles/{profile['id']}/reset")
    assert resp.json()["xp"] == 0
    assert client.get(f"/scores/{profile['id']}").json() == []

    assert client.delete(f"/profiles/{profile['id']}").status_code == 204
    assert client.delete(f"/profiles/{profile['id']}").status_code == 404
    assert client.get("/profiles/current").status_code == 404


def test_sync_without_endpoint_is_local_success(client):
    profile = _create(client)
    resp = client.post(f"/api/sync/{profile['id']}")
    assert resp.status_code == 202
    assert resp.json()["success"] is True


class _FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_sync_posts_export(engine, alice, monkeypatch):
    calls = []

    def fake_post(url, data=None, headers=None, timeout=None):
        calls.append((url, data, timeout))
        return _FakeResponse(200)

    monkeypatch.setattr("faithverse.sync.client.requests.post", fake_post)
    client = CloudSyncClient(engine.transfer, url="https://sync.example.test/", timeout=3)

    result = client.sync_now(alice.id)

    assert result.success is True
    assert calls[0][0] == f"https://sync.example.test/profiles/{alice.id}"
    assert '"username": "alice"' in calls[0][1]
    assert calls[0][2] == 3


def test_sync_failures_are_reported(engine, alice, monkeypatch):
    client = CloudSyncClient(engine.transfer, url="https://sync.example.test")

    monkeypatch.setattr(
        "faithverse.sync.client.requests.post",
        lambda *a, **kw: _FakeResponse(503, {"detail": "maintenance"}),
    )
    result = client.sync_now(alice.id)
    assert (result.success, result.status_code, result.message) == (False, 503, "maintenance")

    def boom(*a, **kw):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr("faithverse.sync.client.requests.post", boom)
    assert client.sync_now(alice.id).success is False
    assert client.sync_now("user_missing").success is False


def test_blank_story_character_is_400(client):
    profile = _create(client)
    resp = client.post(f"/stories/{profile['id']}/%20/choice", json={"score": 1})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Character name cannot be blank"
    assert client.get(f"/stories/{profile['id']}/%20").status_code == 400
    assert client.post(f"/stories/{profile['id']}/%20/restart").status_code == 400
