"""
End-to-end tests for the HTTP boundary using FastAPI's TestClient.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the eventdesk package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from eventdesk.app_factory import create_app  # noqa: E402
from eventdesk.core import config as core_config  # noqa: E402
from eventdesk.core.security import hash_password  # noqa: E402
from eventdesk.db import models as db_models  # noqa: E402
from eventdesk.db import session as db_session  # noqa: E402
from eventdesk.domain.records import Feedback  # noqa: E402
from eventdesk.repositories.json_storage import JsonRecordStore  # noqa: E402


def _env(monkeypatch, tmp_path, **extra):
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("FRONTEND_DIR", str(tmp_path / "public"))
    for key, value in extra.items():
        monkeypatch.setenv(key, value)
    core_config.get_settings.cache_clear()


@pytest.fixture()
def client(tmp_path, monkeypatch):
    _env(monkeypatch, tmp_path)
    with TestClient(create_app()) as test_client:
        yield test_client
    core_config.get_settings.cache_clear()


REGISTRATION = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "a@x.com",
    "phone": "0803",
    "location": "Abuja",
    "gender": "female",
    "channel": "Twitter",
    "interests": ["AI"],
    "consent": True,
}


def test_register_success(client):
    resp = client.post("/api/register", json=REGISTRATION)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert isinstance(body["id"], int)


def test_register_missing_fields(client):
    resp = client.post("/api/register", json={"firstName": "Ada"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Missing required fields: lastName, email, phone, location, gender, channel"
    assert client.get("/api/admin/stats").json()["registrations"] == 0


def test_register_too_many_interests(client):
    resp = client.post("/api/register", json={**REGISTRATION, "interests": ["a", "b", "c"]})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Maximum 2 areas of interest allowed"


def test_non_object_body_is_rejected(client):
    resp = client.post("/api/register", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_feedback_end_to_end(client):
    resp = client.post("/api/feedback", json={"feedback1": "Great event", "rating": 5})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Feedback submitted successfully"}

    feedbacks = client.get("/api/admin/feedbacks").json()
    assert len(feedbacks) == 1
    entry = feedbacks[0]
    assert entry["name"] == "Anonymous User"
    assert entry["rating"] == 5
    assert "Great event" in entry["text"]


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"feedback1": " ", "feedback2": ""}, "At least one feedback field is required"),
        ({"feedback1": "ok", "rating": 0}, "Rating must be between 1 and 5"),
        ({"feedback1": "ok", "rating": "great"}, "Rating must be a whole number between 1 and 5"),
    ],
)
def test_feedback_validation(client, payload, message):
    resp = client.post("/api/feedback", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": message}


def test_search_and_stats(client):
    client.post("/api/register", json=REGISTRATION)
    client.post("/api/register", json={**REGISTRATION, "firstName": "Bob", "email": "b@x.com", "location": "Kano"})
    client.post("/api/register", json={**REGISTRATION, "firstName": "Bob", "email": "b@x.com", "location": "Kano"})

    only_ada = client.get("/api/admin/registrations", params={"search": "ada"}).json()
    assert [r["firstName"] for r in only_ada] == ["Ada"]

    everyone = client.get("/api/admin/registrations", params={"search": ""}).json()
    assert [r["firstName"] for r in everyone] == ["Bob", "Bob", "Ada"]
    assert everyone[0]["timestamp"] >= everyone[-1]["timestamp"]

    assert client.get("/api/admin/stats").json() == {"registrations": 3, "feedbacks": 0, "admins": 3}


def test_health(client):
    client.post("/api/feedback", json={"feedback2": "Nice"})
    body = client.get("/api/health").json()
    assert body["status"] == "OK"
    assert body["database"] == "connected"
    assert body["backend"] == "json"
    assert body["feedbacks"] == 1
    assert body["registrations"] == 0


def test_login(client):
    bad = client.post("/api/admin/login", json={"username": "admin@mtn.ng", "password": "wrong"})
    assert bad.status_code == 401
    assert bad.json()["success"] is False
    assert "token" not in bad.json()

    good = client.post("/api/admin/login", json={"username": "admin@mtn.ng", "password": "1234"})
    assert good.status_code == 200
    assert good.json() == {"success": True, "message": "Login successful", "token": "demo-token"}


def test_login_with_argon2_hash(tmp_path, monkeypatch):
    _env(monkeypatch, tmp_path, ADMIN_PASSWORD_HASH=hash_password("s3cret"), ADMIN_TOKEN="tok")
    with TestClient(create_app()) as client:
        assert client.post("/api/admin/login", json={"username": "admin@mtn.ng", "password": "1234"}).status_code == 401
        resp = client.post("/api/admin/login", json={"username": "admin@mtn.ng", "password": "s3cret"})
        assert resp.json()["token"] == "tok"
    core_config.get_settings.cache_clear()


def test_unknown_api_path_returns_404(client):
    resp = client.get("/api/does/not/exist")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["endpoint"] == "/api/does/not/exist"


def test_frontend_fallback(client, tmp_path):
    public = tmp_path / "public"
    assert "Frontend not installed" in client.get("/").text

    public.mkdir()
    (public / "index.html").write_text("<h1>Register</h1>", encoding="utf-8")
    (public / "admin.html").write_text("<h1>Admin</h1>", encoding="utf-8")
    assert client.get("/some/route").text == "<h1>Register</h1>"
    assert client.get("/admin.html").text == "<h1>Admin</h1>"
    assert client.get("/../secrets.txt").text == "<h1>Register</h1>"


def test_duplicate_policy_reject(tmp_path, monkeypatch):
    _env(monkeypatch, tmp_path, DUPLICATE_EMAIL_POLICY="reject")
    with TestClient(create_app()) as client:
        assert client.post("/api/register", json=REGISTRATION).status_code == 200
        resp = client.post("/api/register", json=REGISTRATION)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Email already registered"
    core_config.get_settings.cache_clear()


def test_sql_backend(tmp_path, monkeypatch):
    _env(monkeypatch, tmp_path, STORAGE_BACKEND="sql", DATABASE_URL=f"sqlite:///{tmp_path / 'api.db'}")
    with TestClient(create_app()) as client:
        assert client.post("/api/register", json=REGISTRATION).json()["success"] is True
        assert client.post("/api/feedback", json={"feedback1": "Great event", "rating": "4"}).status_code == 200
        assert client.get("/api/health").json()["backend"] == "sql"
        regs = client.get("/api/admin/registrations").json()
        assert regs[0]["email"] == "a@x.com"
        assert client.get("/api/admin/feedbacks").json()[0]["rating"] == 4
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


def test_frontend_serves_assets_and_rejects_traversal(client, tmp_path):
    public = tmp_path / "public"
    (public / "js").mkdir(parents=True)
    (public / "index.html").write_text("<h1>Register</h1>", encoding="utf-8")
    (public / "js" / "app.js").write_text("console.log('hi')", encoding="utf-8")
    (tmp_path / "secrets.txt").write_text("top secret", encoding="utf-8")

    asset = client.get("/js/app.js")
    assert asset.status_code == 200
    assert asset.text == "console.log('hi')"
    assert "javascript" in asset.headers["content-type"]
    assert "top secret" not in client.get("/%2e%2e/secrets.txt").text
    assert "top secret" not in client.get("/js/..%2f..%2fsecrets.txt").text
    # API misses never fall through to the frontend
    assert client.get("/api/nope").json()["success"] is False


class _UnreachableStore(JsonRecordStore):
    def ping(self):
        return False


def test_health_reports_disconnected_store(tmp_path, monkeypatch):
    _env(monkeypatch, tmp_path)
    store = _UnreachableStore(tmp_path / "data")
    store.append(Feedback(feedback1="stored before the outage"))
    with TestClient(create_app(core_config.get_settings(), store)) as client:
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "OK"
        assert body["database"] == "disconnected"
        assert (body["registrations"], body["feedbacks"]) == (0, 0)
    core_config.get_settings.cache_clear()


class _ClosingStore(JsonRecordStore):
    closed = False

    def close(self):
        self.closed = True


def test_store_closed_on_shutdown(tmp_path, monkeypatch):
    _env(monkeypatch, tmp_path)
    store = _ClosingStore(tmp_path / "data")
    with TestClient(create_app(core_config.get_settings(), store)) as client:
        assert client.get("/api/health").status_code == 200
        assert store.closed is False
    assert store.closed is True
    core_config.get_settings.cache_clear()


def test_sql_outage_degrades_admin_reads(tmp_path, monkeypatch):
    _env(monkeypatch, tmp_path, STORAGE_BACKEND="sql", DATABASE_URL=f"sqlite:///{tmp_path / 'api.db'}")
    try:
        with TestClient(create_app()) as client:
            assert client.post("/api/register", json=REGISTRATION).json()["success"] is True
            assert len(client.get("/api/admin/registrations").json()) == 1

            db_models.Base.metadata.drop_all(bind=client.app.state.store.engine)

            regs = client.get("/api/admin/registrations", params={"search": "ada"})
            assert (regs.status_code, regs.json()) == (200, [])
            feedbacks = client.get("/api/admin/feedbacks")
            assert (feedbacks.status_code, feedbacks.json()) == (200, [])
            stats = client.get("/api/admin/stats")
            assert stats.status_code == 200
            assert stats.json() == {"registrations": 0, "feedbacks": 0, "admins": 3}
    finally:
        core_config.get_settings.cache_clear()
        db_session.get_engine.cache_clear()
        db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
