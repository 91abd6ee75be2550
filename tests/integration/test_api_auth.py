"""
Integration tests for the /api surface: health, login and access control.
"""
import pytest


class TestHealthAndLogin:
    """Unauthenticated endpoints."""

    def test_health_check(self, client):
        response = client.get("/api/auth/check")

        assert response.status_code == 200
        assert response.get_json() == {"status": "ok", "message": "Server is running"}

    def test_login_returns_user_and_token(self, client):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})

        body = response.get_json()
        assert response.status_code == 200
        assert body["username"] == "admin"
        assert body["role"] == "admin"
        assert body["name"] == "Administrator"
        assert body["token"]
        assert "password" not in body
        assert "passwordHash" not in body

    @pytest.mark.parametrize("payload", [{}, {"username": "admin"}, {"password": "x"}])
    def test_login_requires_both_fields(self, client, payload):
        response = client.post("/api/auth/login", json=payload)

        assert response.status_code == 400
        assert response.get_json() == {"message": "Username and password required"}

    def test_login_with_wrong_password(self, client):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "bad"})

        assert response.status_code == 401
        assert response.get_json() == {"message": "Invalid credentials"}

    def test_me(self, client, login):
        response = client.get("/api/auth/me", headers=login("engineer"))

        assert response.status_code == 200
        assert response.get_json()["role"] == "engineer"


class TestAccessControl:
    """401 without a token, 403 for the wrong role."""

    def test_missing_token(self, client):
        response = client.get("/api/leads")

        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/leads", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    @pytest.mark.parametrize(
        "username,method,path",
        [
            ("engineer", "get", "/api/leads"),
            ("client", "get", "/api/clients"),
            ("exec", "get", "/api/invoices"),
            ("manager", "post", "/api/quotations/1/generate-invoice"),
            ("exec", "post", "/api/quotations/1/approve"),
            ("accountant", "get", "/api/tickets"),
        ],
    )
    def test_role_without_permission(self, client, login, username, method, path):
        response = getattr(client, method)(path, headers=login(username), json={})

        assert response.status_code == 403
        assert response.get_json()["message"]

    def test_every_role_reads_dashboard(self, client, login):
        for username in ("admin", "manager", "exec", "accountant", "engineer", "client"):
            response = client.get("/api/dashboard/metrics", headers=login(username))
            assert response.status_code == 200

    def test_unknown_route(self, client, admin_headers):
        response = client.get("/api/nowhere", headers=admin_headers)

        assert response.status_code == 404
        assert response.get_json() == {"message": "Not Found"}
