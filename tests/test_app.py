"""Tests for the liveness endpoints, the demo seed route and error envelopes."""

from finadvisor.config import Settings, get_settings
from finadvisor.models import User
from finadvisor.security import verify_password


class TestLiveness:

    def test_root(self, client):
        assert client.get("/").json() == {"message": "Welcome to Financial Advisor API"}

    def test_health_check(self, client):
        body = client.get("/api/health-check").json()
        assert body["success"] is True
        assert body["message"] == "Server is healthy"
        assert body["timestamp"].endswith("Z")

    def test_user_router_probe(self, client):
        assert client.get("/api/users/test").json() == {"message": "User routes working"}

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestSeed:

    def test_seed_replaces_users_with_demo_accounts(self, client, alice, db, settings):
        response = client.get("/api/seed/users")
        assert response.status_code == 201
        assert response.json()["users"] == [
            {"email": "user@example.com", "password": "password123"},
            {"email": "admin@example.com", "password": "admin123"},
        ]

        users = {u.email: u for u in db.query(User).all()}
        assert set(users) == {"user@example.com", "admin@example.com"}
        assert verify_password("admin123", users["admin@example.com"].password, settings)

    def test_seed_removes_existing_accounts(self, client, alice):
        client.get("/api/seed/users")
        response = client.post("/api/users/login", json={"email": alice.email, "password": "secret123"})
        assert response.status_code == 401

    def test_seed_is_hidden_outside_demo_mode(self, client, alice, db):
        from finadvisor.main import app
        app.dependency_overrides[get_settings] = lambda: Settings(demo_mode=False, bcrypt_rounds=4)
        response = client.get("/api/seed/users")
        assert response.status_code == 404
        assert response.json() == {"message": "Not found"}
        assert db.query(User).count() == 1
