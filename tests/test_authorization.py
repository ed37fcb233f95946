import pytest
from jose import jwt

from warden.config import get_settings
from warden.domain.models.session import SessionRecord

GAME = {
    "title": "Celeste",
    "imageUrl": "https://img.example.com/celeste.png",
    "downloadUrl": "https://dl.example.com/celeste",
    "category": "PC",
}

ADMIN_ROUTES = [
    ("post", "/api/games", {"json": GAME}),
    ("patch", "/api/games/1", {"json": {"title": "Renamed"}}),
    ("delete", "/api/games/1", {}),
    ("post", "/api/games/reorder", {"json": {"orders": []}}),
    ("get", "/api/admin/list", {}),
    ("post", "/api/admin/promote", {"json": {"email": "x@example.com", "password": "secret1"}}),
    ("post", "/api/admin/remove", {"json": {"email": "x@example.com"}}),
]


@pytest.mark.parametrize("method,path,kwargs", ADMIN_ROUTES)
def test_admin_routes_without_session_are_unauthorized(client, method, path, kwargs):
    response = getattr(client, method)(path, **kwargs)
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized", "code": "UnauthorizedException"}


@pytest.mark.parametrize("method,path,kwargs", ADMIN_ROUTES)
def test_admin_routes_for_non_admin_are_forbidden(user_client, method, path, kwargs):
    response = getattr(user_client, method)(path, **kwargs)
    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden"


def test_admin_session_passes_the_gate(admin_client, make_game):
    game = make_game("Gated")
    response = admin_client.patch(f"/api/games/{game.id}", json={"title": "Opened"})
    assert response.status_code == 200


def test_public_routes_need_no_session(client, make_game):
    game = make_game("Public")
    assert client.get("/api/games").status_code == 200
    assert client.get(f"/api/games/{game.id}").status_code == 200


def test_expired_principal_is_unauthorized(client, sign_in):
    sign_in(is_admin=True, expires_in=-5)
    response = client.get("/api/admin/list")
    assert response.status_code == 401


def test_expired_session_row_is_unauthorized_and_removed(client, sign_in, db_session):
    sign_in(is_admin=True)
    record = db_session.query(SessionRecord).one()
    record.expire = record.expire.replace(year=2000)
    db_session.commit()

    response = client.get("/api/admin/list")
    assert response.status_code == 401
    assert db_session.query(SessionRecord).count() == 0


def test_tampered_cookie_is_ignored(client, sign_in):
    sign_in(is_admin=True)
    name = get_settings().SESSION_COOKIE_NAME
    header, payload, signature = client.cookies.get(name).split(".")
    client.cookies.set(name, f"{header}.{payload}.{signature[::-1]}")

    response = client.get("/api/admin/list")
    assert response.status_code == 401


def test_cookie_signed_with_another_secret_is_ignored(client, sign_in, db_session):
    sign_in(is_admin=True)
    sid = db_session.query(SessionRecord).one().sid
    forged = jwt.encode({"sid": sid}, "not-the-session-secret", algorithm="HS256")
    client.cookies.set(get_settings().SESSION_COOKIE_NAME, forged)

    assert client.get("/api/admin/list").status_code == 401


def test_unsigned_cookie_is_ignored(client, sign_in, db_session):
    sign_in(is_admin=True)
    sid = db_session.query(SessionRecord).one().sid
    client.cookies.set(get_settings().SESSION_COOKIE_NAME, sid)

    assert client.get("/api/admin/list").status_code == 401


def test_cookie_without_sid_claim_is_ignored(client):
    token = jwt.encode({"user": "admin"}, get_settings().SESSION_SECRET, algorithm="HS256")
    client.cookies.set(get_settings().SESSION_COOKIE_NAME, token)

    assert client.get("/api/admin/list").status_code == 401


def test_super_admin_route_requires_super_admin(client, sign_in):
    payload = {"email": "new-admin@example.com", "password": "secret1"}

    assert client.post("/api/admins", json=payload).status_code == 401

    sign_in(is_admin=True, is_super_admin=False, email="plain-admin@example.com")
    assert client.post("/api/admins", json=payload).status_code == 403

    sign_in(is_admin=True, is_super_admin=True, email="boss@example.com")
    assert client.post("/api/admins", json=payload).status_code == 201
