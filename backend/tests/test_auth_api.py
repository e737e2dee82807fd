from app.core.config import settings
from app.db.init_db import init_db
from app.models.session import UserSession

from conftest import ADMIN_PASSWORD, USER_PASSWORD, bearer, login, make_user


def test_bootstrap_admin_can_log_in(client, db):
    init_db(db)

    response = client.post("/api/auth/login", json={"password": settings.ADMIN_PASS})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["name"] == settings.ADMIN_USER
    assert body["user"]["isAdmin"] is True
    assert body["user"]["allowedDevices"] == settings.ADMIN_DEVICES
    assert response.cookies.get(settings.AUTH_COOKIE_NAME) == body["token"]

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["name"] == settings.ADMIN_USER


def test_init_db_is_idempotent(db):
    first = init_db(db)
    second = init_db(db)
    assert first.id == second.id


def test_wrong_password_returns_envelope(client, user):
    response = login(client, "wrong")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid password"}


def test_missing_password_is_a_validation_error(client):
    response = client.post("/api/auth/login", json={})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "password" in body["error"]


def test_blank_password_is_a_validation_error(client):
    response = client.post("/api/auth/login", json={"password": "   "})
    assert response.status_code == 400


def test_device_limit_over_http(client, user):
    assert login(client, USER_PASSWORD, device_id="tv").status_code == 200

    response = login(client, USER_PASSWORD, device_id="phone")
    assert response.status_code == 401
    assert response.json()["error"] == "Device limit reached"


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_me_rejects_garbage_token(client):
    response = client.get("/api/auth/me", headers=bearer("garbage"))
    assert response.status_code == 401


def test_logout_revokes_token_and_clears_cookie(client, db, user):
    token = login(client, USER_PASSWORD).json()["token"]
    headers = bearer(token)
    assert client.get("/api/auth/me", headers=headers).status_code == 200

    response = client.post("/api/auth/logout", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert db.query(UserSession).filter(UserSession.token == token).count() == 0

    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_logout_without_token_succeeds(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_suspended_user_token_stops_working(client, db):
    member = make_user(db, "Member", "member-pass")
    headers = bearer(login(client, "member-pass").json()["token"])
    assert client.get("/api/movies", headers=headers).status_code == 200

    member.is_suspended = True
    db.commit()

    assert client.get("/api/movies", headers=headers).status_code == 401


def test_cookie_is_accepted(client, user):
    response = client.post("/api/auth/login", json={"password": USER_PASSWORD})
    token = response.json()["token"]
    client.cookies.clear()

    client.cookies.set(settings.AUTH_COOKIE_NAME, token)
    assert client.get("/api/auth/me").status_code == 200


def test_admin_and_user_sessions_are_independent(client, admin, user):
    admin_token = login(client, ADMIN_PASSWORD).json()["token"]
    user_token = login(client, USER_PASSWORD).json()["token"]

    client.post("/api/auth/logout", headers=bearer(user_token))

    assert client.get("/api/auth/me", headers=bearer(admin_token)).status_code == 200
    assert client.get("/api/auth/me", headers=bearer(user_token)).status_code == 401
