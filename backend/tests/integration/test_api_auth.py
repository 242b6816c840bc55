"""Integration tests for password login and session enforcement."""

from datetime import datetime, timedelta, timezone

from models import AppSession

HEADER = "X-Session-Token"


def _login(auth_client) -> str:
    response = auth_client.post("/api/auth/login", json={"password": "family-secret"})
    assert response.status_code == 200
    return response.json()["session_token"]


class TestLogin:
    def test_wrong_password(self, auth_client):
        response = auth_client.post("/api/auth/login", json={"password": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid password"

    def test_empty_password(self, auth_client):
        assert auth_client.post("/api/auth/login", json={"password": ""}).status_code == 400

    def test_not_configured(self, auth_client, monkeypatch):
        from config import settings

        monkeypatch.setattr(settings, "APP_PASSWORD", "")
        assert auth_client.post("/api/auth/login", json={"password": "x"}).status_code == 500


class TestSessionEnforcement:
    def test_protected_route_requires_token(self, auth_client):
        response = auth_client.get("/api/assets")
        assert response.status_code == 401
        assert response.json()["detail"] == "Session expired"

    def test_token_grants_access(self, auth_client):
        token = _login(auth_client)
        assert auth_client.get("/api/assets", headers={HEADER: token}).status_code == 200
        session = auth_client.get("/api/auth/session", headers={HEADER: token}).json()
        assert session["session_token"] == token

    def test_expired_token(self, auth_client, db):
        db.add(AppSession(
            session_token="stale", expires_at=datetime.now(timezone.utc) - timedelta(minutes=1)
        ))
        db.commit()
        assert auth_client.get("/api/assets", headers={HEADER: "stale"}).status_code == 401

    def test_logout_revokes(self, auth_client):
        token = _login(auth_client)
        assert auth_client.post("/api/auth/logout", headers={HEADER: token}).status_code == 204
        assert auth_client.get("/api/assets", headers={HEADER: token}).status_code == 401

    def test_health_is_public(self, auth_client):
        assert auth_client.get("/health").status_code == 200

    def test_auth_disabled(self, auth_client, monkeypatch):
        from config import settings

        monkeypatch.setattr(settings, "REQUIRE_AUTH", False)
        assert auth_client.get("/api/assets").status_code == 200
