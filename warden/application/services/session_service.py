"""Server-side sessions behind a signed, opaque cookie.

The cookie carries the session id in an HS256-signed token; everything else
lives in the ``sessions`` table so that sessions survive restarts and are
shared between workers. A session payload looks like::

    {"principal": {...}, "tokens": {...}}   # signed in
    {"oidc": {"state": ..., ...}}           # identity-provider login in flight
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from warden.config import Settings
from warden.domain.repositories.session_repository import SessionRepository
from warden.domain.schemas.auth import Principal

logger = structlog.get_logger(__name__)

SESSION_COOKIE_ALGORITHM = "HS256"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sign_session_id(sid: str, secret: str) -> str:
    return jwt.encode({"sid": sid}, secret, algorithm=SESSION_COOKIE_ALGORITHM)


def unsign_session_id(value: Optional[str], secret: str) -> Optional[str]:
    """Return the session id if the cookie signature checks out, else None."""
    if not value:
        return None
    try:
        payload = jwt.decode(value, secret, algorithms=[SESSION_COOKIE_ALGORITHM])
    except JWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None


class SessionManager:
    """Creates, loads and destroys persisted sessions."""

    def __init__(self, repo: SessionRepository, settings: Settings):
        self.repo = repo
        self.settings = settings

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.settings.SESSION_TTL_SECONDS)

    def sign(self, sid: str) -> str:
        return sign_session_id(sid, self.settings.SESSION_SECRET)

    def sid_from_cookie(self, cookie_value: Optional[str]) -> Optional[str]:
        return unsign_session_id(cookie_value, self.settings.SESSION_SECRET)

    def create(self, data: dict) -> str:
        sid = secrets.token_urlsafe(32)
        self.repo.save(sid, data, utcnow() + self.ttl)
        return sid

    def load(self, sid: Optional[str]) -> Optional[dict]:
        """Return the session payload, or None if it is missing or expired."""
        if not sid:
            return None
        record = self.repo.get(sid)
        if record is None:
            return None
        if as_utc(record.expire) <= utcnow():
            self.repo.delete(sid)
            return None
        return dict(record.sess or {})

    def destroy(self, sid: Optional[str]) -> None:
        if sid:
            self.repo.delete(sid)

    def login(self, principal: Principal, previous_sid: Optional[str] = None, **extra) -> str:
        """Start a fresh session for a principal. Any previous session is dropped."""
        self.destroy(previous_sid)
        data = {"principal": principal.model_dump(mode="json"), **extra}
        sid = self.create(data)
        logger.info("Session started", principal_id=principal.id, source=principal.source)
        return sid

    def purge_expired(self) -> int:
        return self.repo.purge_expired(utcnow())


def principal_from_session(data: Optional[dict]) -> Optional[Principal]:
    """Extract a live principal from a session payload. Expired principals count as absent."""
    if not data or not data.get("principal"):
        return None
    try:
        principal = Principal.model_validate(data["principal"])
    except PydanticValidationError:
        logger.warning("Discarding malformed session principal")
        return None
    if principal.is_expired():
        return None
    return principal
