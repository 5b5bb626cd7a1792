"""HTTP tests for admin login, session check, logout and admin route guarding."""

import time

import pytest
from itsdangerous import URLSafeTimedSerializer

from src.config.settings import Settings, get_settings


def test_login_sets_session_cookie(client):
    response = client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": "correct horse"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Login successful"}

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("admin_session=")
    assert "HttpOnly" in set_cookie
    assert "Max-Age=86400" in set_cookie
    assert "Path=/" in set_cookie
    assert "samesite=strict" in set_cookie.lower()
    assert "Secure" not in set_cookie


@pytest.mark.parametrize("body", [
    {"email": "admin@example.com", "password": "wrong"},
    {"email": "someone@example.com", "password": "correct horse"},
    {"email": "admin@example.com"},
    {"password": "correct horse"},
    {"email": "admin@example.com", "password": None},
    {},
])
def test_login_rejects_mismatch_without_cookie(client, body):
    response = client.post("/api/auth/login", json=body)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}
    assert "set-cookie" not in response.headers


def test_check_without_session(client):
    response = client.get("/api/auth/check")

    assert response.status_code == 401
    assert response.json() == {"authenticated": False}


def test_check_with_session(admin):
    response = admin.get("/api/auth/check")

    assert response.status_code == 200
    body = response.json()
    assert body["authenticated"] is True
    assert body["email"] == "admin@example.com"
    assert "expiresAt" in body


def test_forged_cookie_rejected(client):
    client.cookies.set("admin_session", "YWRtaW5AZXhhbXBsZS5jb206MTcxODAwMDAwMDAwMA==")

    assert client.get("/api/auth/check").status_code == 401
    assert client.get("/api/admin/galleries").status_code == 401


def test_logout_clears_session(admin):
    response = admin.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert admin.get("/api/auth/check").status_code == 401


@pytest.mark.parametrize("path", [
    "/api/admin/galleries",
    "/api/admin/galleries/renames",
    "/api/admin/videos",
    "/api/admin/messages",
    "/api/admin/messages/unread-count",
])
def test_admin_routes_require_session(client, path):
    assert client.get(path).status_code == 401


@pytest.mark.parametrize("content", [b"", b"not json", b"[]"])
def test_login_with_unreadable_body(client, content):
    response = client.post(
        "/api/auth/login",
        content=content,
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_admin_routes_closed_without_session_secret(app, client):
    app.dependency_overrides[get_settings] = lambda: Settings(session_secret_key="")
    forged = URLSafeTimedSerializer("change-this-secret", salt="admin-session").dumps({
        "sub": "admin@example.com",
        "iat": int(time.time()),
        "exp": int(time.time()) + 3600,
    })
    client.cookies.set("admin_session", forged)

    assert client.get("/api/admin/messages").status_code == 401
    assert client.get("/api/auth/check").status_code == 401

    login = client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": "correct horse"},
    )
    assert login.status_code == 401
    assert "set-cookie" not in login.headers


def test_missing_session_secret_is_reported():
    assert "SESSION_SECRET_KEY" in Settings(session_secret_key="").validate_required_fields()
