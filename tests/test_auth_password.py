import time

from warden.domain.models.admin import Admin
from warden.domain.models.session import SessionRecord

PRIMARY_EMAIL = "aaryabpandey@gmail.com"
PRIMARY_PASSWORD = "primary-pass-254"


def test_admin_row_login_returns_principal_and_cookie(client, make_admin):
    admin = make_admin("ops@example.com", "correct-horse")

    response = client.post("/api/login", json={"email": "ops@example.com", "password": "correct-horse"})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == admin.id
    assert body["email"] == "ops@example.com"
    assert body["isAdmin"] is True
    assert body["isSuperAdmin"] is False
    assert body["source"] == "password"
    assert abs(body["expiresAt"] - (time.time() + 3600)) < 60
    assert "connect.sid" in response.cookies


def test_login_session_grants_admin_access(client, make_admin):
    make_admin("ops@example.com", "correct-horse")
    client.post("/api/login", json={"email": "ops@example.com", "password": "correct-horse"})

    response = client.get("/api/admin/list")
    assert response.status_code == 200


def test_invalid_credentials(client):
    response = client.post("/api/login", json={"email": "a@x.com", "password": "short"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"
    assert "connect.sid" not in response.cookies


def test_wrong_password_for_existing_admin(client, make_admin, db_session):
    make_admin("ops@example.com", "correct-horse")

    response = client.post("/api/login", json={"email": "ops@example.com", "password": "battery-staple"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"
    assert db_session.query(SessionRecord).count() == 0


def test_primary_admin_fallback_login(client):
    response = client.post("/api/login", json={"email": PRIMARY_EMAIL, "password": PRIMARY_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "primary-admin"
    assert body["isAdmin"] is True
    assert body["isSuperAdmin"] is True


def test_primary_admin_email_is_case_insensitive(client):
    response = client.post("/api/login", json={"email": "AaryabPandey@Gmail.com", "password": PRIMARY_PASSWORD})
    assert response.status_code == 200


def test_primary_admin_fallback_rejects_wrong_password(client):
    response = client.post("/api/login", json={"email": PRIMARY_EMAIL, "password": "guess"})
    assert response.status_code == 401


def test_primary_admin_with_row_can_use_either_password(client, make_admin):
    make_admin(PRIMARY_EMAIL, "row-password", is_super_admin=True)

    assert client.post("/api/login", json={"email": PRIMARY_EMAIL, "password": "row-password"}).status_code == 200
    assert client.post("/api/login", json={"email": PRIMARY_EMAIL, "password": PRIMARY_PASSWORD}).status_code == 200


def test_login_requires_both_fields(client):
    response = client.post("/api/login", json={"email": "ops@example.com"})
    assert response.status_code == 400
    assert response.json()["code"] == "ValidationError"


def test_login_replaces_previous_session(client, make_admin, db_session):
    make_admin("ops@example.com", "correct-horse")
    credentials = {"email": "ops@example.com", "password": "correct-horse"}

    client.post("/api/login", json=credentials)
    client.post("/api/login", json=credentials)

    assert db_session.query(SessionRecord).count() == 1


def test_passwords_are_stored_hashed(make_admin, db_session):
    make_admin("ops@example.com", "correct-horse")
    stored = db_session.query(Admin).one().password_hash
    assert stored != "correct-horse"
    assert stored.startswith("$pbkdf2-sha256$")


def test_logout_destroys_session(client, make_admin, db_session):
    make_admin("ops@example.com", "correct-horse")
    client.post("/api/login", json={"email": "ops@example.com", "password": "correct-horse"})
    assert db_session.query(SessionRecord).count() == 1

    response = client.get("/api/logout", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert db_session.query(SessionRecord).count() == 0
    assert client.get("/api/admin/list").status_code == 401


def test_logout_without_session_still_redirects(client):
    response = client.get("/api/logout", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/"


def test_auth_user_returns_password_principal(client, make_admin):
    admin = make_admin("ops@example.com", "correct-horse")
    client.post("/api/login", json={"email": "ops@example.com", "password": "correct-horse"})

    response = client.get("/api/auth/user")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == admin.id
    assert body["isAdmin"] is True
    assert body["source"] == "password"


def test_auth_user_without_session(client):
    response = client.get("/api/auth/user")
    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized"
