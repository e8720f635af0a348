"""Admin login, logout and route protection."""
from conftest import ADMIN_PASSWORD, ADMIN_USERNAME, create_user

from talencor.api.middleware.rate_limit import reset_rate_limits


def test_login_success_sets_session(client):
    create_user()
    resp = client.post("/api/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["user"]["username"] == ADMIN_USERNAME

    auth = client.get("/api/admin/auth").json()
    assert auth["is_authenticated"] is True
    assert auth["user"]["username"] == ADMIN_USERNAME


def test_login_wrong_password(client):
    create_user()
    resp = client.post("/api/admin/login", json={"username": ADMIN_USERNAME, "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid username or password"


def test_login_unknown_user(client):
    resp = client.post("/api/admin/login", json={"username": "ghost", "password": "whatever"})
    assert resp.status_code == 401


def test_login_missing_fields(client):
    resp = client.post("/api/admin/login", json={"username": "", "password": ""})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Username and password are required"


def test_login_non_admin_rejected(client):
    create_user(username="staff", password="StaffPass1!", is_admin=False)
    resp = client.post("/api/admin/login", json={"username": "staff", "password": "StaffPass1!"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "You don't have admin access"


def test_logout_clears_session(admin_client):
    resp = admin_client.post("/api/admin/logout")
    assert resp.status_code == 200
    assert admin_client.get("/api/admin/auth").json() == {"is_authenticated": False}


def test_protected_route_requires_login(client):
    resp = client.get("/api/job-postings")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Please log in to access this area"


def test_protected_route_with_admin(admin_client):
    resp = admin_client.get("/api/job-postings")
    assert resp.status_code == 200
    assert resp.json() == []


def test_tampered_cookie_is_anonymous(client):
    client.cookies.set("talencor_session", "garbage")
    assert client.get("/api/admin/auth").json() == {"is_authenticated": False}


def test_login_rate_limited(client, monkeypatch):
    from talencor.config import get_settings

    monkeypatch.setattr(get_settings(), "rate_limit_auth_requests", 3)
    reset_rate_limits()
    for _ in range(3):
        assert client.post("/api/admin/login", json={"username": "x", "password": "y"}).status_code == 401
    resp = client.post("/api/admin/login", json={"username": "x", "password": "y"})
    assert resp.status_code == 429
