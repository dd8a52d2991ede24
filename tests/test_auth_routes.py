from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from conftest import ADMIN_PASSWORD, ADMIN_USERNAME, JWT_SECRET, make_config
from talent_site.api.server import create_app

COOKIE = "admin_token"


def test_login_sets_secure_strict_httponly_cookie(client):
    res = client.post("/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})

    assert res.status_code == 200
    assert res.json() == {"ok": True}
    header = res.headers["set-cookie"]
    assert header.startswith(f"{COOKIE}=")
    assert "HttpOnly" in header
    assert "Secure" in header
    assert "SameSite=strict" in header
    assert "Max-Age=86400" in header
    assert client.cookies.get(COOKIE)


def test_login_then_admin_page_renders_panel(client):
    assert "Admin login" in client.get("/admin").text

    client.post("/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    page = client.get("/admin")

    assert page.status_code == 200
    assert "Admin panel" in page.text
    assert "Recent bookings" in page.text


@pytest.mark.parametrize(
    "body",
    [
        {"username": ADMIN_USERNAME, "password": "wrong"},
        {"username": "root", "password": ADMIN_PASSWORD},
        {"username": ADMIN_USERNAME},
        {},
    ],
)
def test_login_rejects_bad_credentials_without_cookie(client, body):
    res = client.post("/admin/login", json=body)

    assert res.status_code == 401
    assert res.json() == {"error": "invalid_credentials"}
    assert "set-cookie" not in res.headers
    assert client.cookies.get(COOKIE) is None


def test_logout_clears_cookie(admin_client):
    res = admin_client.post("/admin/logout")

    assert res.status_code == 200
    assert res.json() == {"ok": True}
    assert "Max-Age=0" in res.headers["set-cookie"]
    assert admin_client.cookies.get(COOKIE) is None
    assert "Admin login" in admin_client.get("/admin").text


def test_logout_without_session_still_succeeds(client):
    res = client.post("/admin/logout")
    assert res.status_code == 200
    assert res.headers["set-cookie"].startswith(f"{COOKIE}=")


def test_admin_page_ignores_forged_and_expired_tokens(client):
    client.cookies.set(COOKIE, jwt.encode({"sub": "admin", "role": "admin"}, "not-the-secret-0123456789abcdef0123456789", algorithm="HS256"))
    assert "Admin login" in client.get("/admin").text

    past = int((datetime.now(timezone.utc) - timedelta(minutes=5)).timestamp())
    client.cookies.set(COOKIE, jwt.encode({"sub": "admin", "role": "admin", "exp": past}, JWT_SECRET, algorithm="HS256"))
    assert "Admin login" in client.get("/admin").text


def test_admin_api_requires_session(client):
    res = client.get("/api/admin/bookings")
    assert res.status_code == 401
    assert res.json() == {"error": "missing_token"}

    client.cookies.set(COOKIE, "garbage")
    res = client.get("/api/admin/questions")
    assert res.status_code == 401
    assert res.json() == {"error": "token_invalid"}


def test_admin_api_requires_admin_role(client):
    client.cookies.set(COOKIE, jwt.encode({"sub": "someone", "role": "user"}, JWT_SECRET, algorithm="HS256"))
    res = client.get("/api/admin/bookings")
    assert res.status_code == 403
    assert res.json() == {"error": "admin_required"}


def test_admin_api_lists_submissions(admin_client):
    admin_client.post("/api/bookings", json={"client_name": "A", "client_email": "a@x.com"})
    admin_client.post("/api/questions", json={"message": "hi"})

    bookings = admin_client.get("/api/admin/bookings").json()
    questions = admin_client.get("/api/admin/questions", params={"limit": 1}).json()

    assert [b["client_name"] for b in bookings] == ["A"]
    assert [q["message"] for q in questions] == ["hi"]
    assert admin_client.get("/api/admin/questions", params={"limit": 0}).status_code == 400


def test_production_refuses_insecure_secret():
    cfg = make_config(ENVIRONMENT="production", AUTH_JWT_SECRET="dev_change_me")
    with pytest.raises(RuntimeError):
        with TestClient(create_app(cfg)):
            pass
