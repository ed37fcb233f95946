import base64
import os
import tempfile
import time
import urllib.parse
from typing import Generator

# Settings are cached on first import, so the environment goes first
_tmpdir = tempfile.mkdtemp(prefix="warden-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'warden.db')}"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["SESSION_COOKIE_SECURE"] = "false"
os.environ["PRIMARY_ADMIN_EMAIL"] = "aaryabpandey@gmail.com"
os.environ["PRIMARY_ADMIN_PASSWORD"] = "primary-pass-254"
os.environ["ISSUER_URL"] = "https://idp.example.test"
os.environ["OIDC_CLIENT_ID"] = "warden-test-client"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from warden.application.services.auth_service import hash_password
from warden.application.services.session_service import SessionManager
from warden.config import get_settings
from warden.domain.models.admin import Admin
from warden.domain.models.game import Game
from warden.domain.schemas.auth import Principal
from warden.infrastructure.database import Base, get_db
from warden.infrastructure.oidc import OIDCRegistry
from warden.infrastructure.repositories.session_repository import SQLAlchemySessionRepository
from warden.interfaces.deps import get_oidc_registry
from warden.main import app

ISSUER = "https://idp.example.test"
CLIENT_ID = "warden-test-client"
PRIMARY_EMAIL = "aaryabpandey@gmail.com"
PRIMARY_PASSWORD = "primary-pass-254"


class FakeIdentityProvider:
    """In-process OpenID provider served through httpx.MockTransport."""

    signing_secret = "fake-idp-signing-secret-0123456789"
    kid = "test-key"

    def __init__(self):
        self.codes: dict[str, dict] = {}
        self.requests: list[str] = []
        self.token_requests: list[dict] = []
        self.transport = httpx.MockTransport(self.handle)

    def count(self, path: str) -> int:
        return sum(1 for p in self.requests if p == path)

    def issue_code(self, sub: str, email: str, nonce: str, **extra_claims) -> str:
        code = f"code-{len(self.codes) + 1}"
        now = int(time.time())
        self.codes[code] = {
            "iss": ISSUER,
            "aud": CLIENT_ID,
            "sub": sub,
            "email": email,
            "nonce": nonce,
            "iat": now,
            "exp": now + 3600,
            **extra_claims,
        }
        return code

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url.path)
        if request.url.path == "/.well-known/openid-configuration":
            return httpx.Response(
                200,
                json={
                    "issuer": ISSUER,
                    "authorization_endpoint": f"{ISSUER}/auth",
                    "token_endpoint": f"{ISSUER}/token",
                    "jwks_uri": f"{ISSUER}/jwks",
                    "end_session_endpoint": f"{ISSUER}/session/end",
                    "id_token_signing_alg_values_supported": ["HS256"],
                },
            )
        if request.url.path == "/jwks":
            k = base64.urlsafe_b64encode(self.signing_secret.encode()).decode().rstrip("=")
            return httpx.Response(
                200, json={"keys": [{"kty": "oct", "k": k, "alg": "HS256", "kid": self.kid, "use": "sig"}]}
            )
        if request.url.path == "/token":
            form = dict(urllib.parse.parse_qsl(request.content.decode()))
            self.token_requests.append(form)
            claims = self.codes.pop(form.get("code"), None)
            if claims is None:
                return httpx.Response(400, json={"error": "invalid_grant", "error_description": "unknown code"})
            id_token = jwt.encode(claims, self.signing_secret, algorithm="HS256", headers={"kid": self.kid})
            return httpx.Response(
                200,
                json={
                    "access_token": f"access-{claims['sub']}",
                    "refresh_token": f"refresh-{claims['sub']}",
                    "id_token": id_token,
                    "token_type": "Bearer",
                    "expires_in": 3600,
                },
            )
        return httpx.Response(404)


@pytest.fixture(scope="function")
def db_session() -> Generator:
    # In-memory SQLite with a single shared connection
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def fake_idp() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def oidc_registry(fake_idp) -> OIDCRegistry:
    return OIDCRegistry(get_settings(), transport=fake_idp.transport)


@pytest.fixture(scope="function")
def client(db_session, oidc_registry):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_oidc_registry] = lambda: oidc_registry
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def session_manager(db_session) -> SessionManager:
    return SessionManager(SQLAlchemySessionRepository(db_session), get_settings())


@pytest.fixture
def make_admin(db_session):
    def _make(email: str, password: str = "admin-pass", is_super_admin: bool = False) -> Admin:
        admin = Admin(email=email, password_hash=hash_password(password), is_super_admin=is_super_admin)
        db_session.add(admin)
        db_session.commit()
        db_session.refresh(admin)
        return admin

    return _make


@pytest.fixture
def make_game(db_session):
    def _make(title: str, category: str = "PC", order: int = 0, **fields) -> Game:
        game = Game(
            title=title,
            image_url=fields.pop("image_url", "https://img.example.com/cover.png"),
            download_url=fields.pop("download_url", "https://dl.example.com/file"),
            category=category,
            order=order,
            **fields,
        )
        db_session.add(game)
        db_session.commit()
        db_session.refresh(game)
        return game

    return _make


@pytest.fixture
def sign_in(client, session_manager):
    """Attach a session for an arbitrary principal to the test client."""

    def _sign_in(
        is_admin: bool = False,
        is_super_admin: bool = False,
        email: str = "someone@example.com",
        expires_in: int = 3600,
        source: str = "oidc",
    ) -> Principal:
        principal = Principal(
            id=f"{source}-{email}",
            email=email,
            is_admin=is_admin,
            is_super_admin=is_super_admin,
            expires_at=int(time.time()) + expires_in,
            source=source,
        )
        sid = session_manager.login(principal)
        client.cookies.set(get_settings().SESSION_COOKIE_NAME, session_manager.sign(sid))
        return principal

    return _sign_in


@pytest.fixture
def admin_client(client, sign_in):
    sign_in(is_admin=True, email="admin@example.com", source="password")
    return client


@pytest.fixture
def user_client(client, sign_in):
    sign_in(is_admin=False, email="viewer@example.com")
    return client
