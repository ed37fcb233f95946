"""Auth service: password hashing, admin login and identity-provider user upserts."""

import time
from functools import lru_cache
from typing import Optional

import structlog
from passlib.context import CryptContext

from warden.config import Settings
from warden.domain.models.user import User
from warden.domain.repositories.credential_repository import AdminRepository, UserRepository
from warden.domain.schemas.auth import OIDC_SOURCE, PASSWORD_SOURCE, IdentityClaims, Principal

logger = structlog.get_logger(__name__)

# pbkdf2_sha256 avoids bcrypt's 72-byte password limit
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

PRIMARY_ADMIN_ID = "primary-admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@lru_cache(maxsize=4)
def _primary_password_hash(password: str) -> str:
    return hash_password(password)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def is_primary_admin(email: Optional[str], settings: Settings) -> bool:
    return bool(email) and normalize_email(email) == normalize_email(settings.PRIMARY_ADMIN_EMAIL)


def authenticate_admin(
    admins: AdminRepository,
    email: str,
    password: str,
    settings: Settings,
    now: Optional[float] = None,
) -> Optional[Principal]:
    """Check an email/password pair against the admins table, then the primary fallback.

    Returns the session principal on success and None otherwise. The caller
    must not tell the client which of the two checks failed.
    """
    now = now if now is not None else time.time()
    expires_at = int(now) + settings.ADMIN_SESSION_SECONDS

    admin = admins.get_by_email(email) if email else None
    if admin is not None:
        if verify_password(password, admin.password_hash):
            logger.info("Admin login succeeded", admin_id=admin.id)
            return Principal(
                id=admin.id,
                email=admin.email,
                is_admin=True,
                is_super_admin=bool(admin.is_super_admin) or is_primary_admin(admin.email, settings),
                expires_at=expires_at,
                source=PASSWORD_SOURCE,
            )
    else:
        pwd_context.dummy_verify()

    if is_primary_admin(email, settings) and settings.PRIMARY_ADMIN_PASSWORD:
        if verify_password(password, _primary_password_hash(settings.PRIMARY_ADMIN_PASSWORD)):
            logger.info("Primary admin fallback login succeeded")
            return Principal(
                id=PRIMARY_ADMIN_ID,
                email=settings.PRIMARY_ADMIN_EMAIL,
                is_admin=True,
                is_super_admin=True,
                expires_at=expires_at,
                source=PASSWORD_SOURCE,
            )

    logger.warning("Admin login failed")
    return None


def claims_from_id_token(raw: dict) -> IdentityClaims:
    """Map provider claims onto our user fields.

    Replit-style providers send ``first_name``/``profile_image_url``; standard
    OIDC providers send ``given_name``/``picture``. Both are accepted.
    """
    return IdentityClaims(
        **{
            **raw,
            "sub": str(raw["sub"]),
            "email": raw["email"],
            "first_name": raw.get("first_name") or raw.get("given_name"),
            "last_name": raw.get("last_name") or raw.get("family_name"),
            "profile_image_url": raw.get("profile_image_url") or raw.get("picture"),
            "exp": int(raw["exp"]),
        }
    )


def upsert_identity_user(users: UserRepository, claims: IdentityClaims, settings: Settings) -> User:
    """Create or refresh the user row for a verified identity.

    The primary admin email always gets the admin flag; everyone else keeps
    whatever flag they already had (new users start without it).
    """
    existing = users.get_by_id(claims.sub)
    if is_primary_admin(claims.email, settings):
        is_admin = True
    else:
        is_admin = bool(existing.is_admin) if existing is not None else False

    user = users.upsert(
        {
            "id": claims.sub,
            "email": claims.email,
            "first_name": claims.first_name,
            "last_name": claims.last_name,
            "profile_image_url": claims.profile_image_url,
            "is_admin": is_admin,
        }
    )
    logger.info("Identity user upserted", user_id=user.id, is_admin=user.is_admin, created=existing is None)
    return user


def build_identity_principal(user: User, claims: IdentityClaims, settings: Settings) -> Principal:
    return Principal(
        id=user.id,
        email=user.email,
        is_admin=bool(user.is_admin),
        is_super_admin=is_primary_admin(user.email, settings),
        expires_at=claims.exp,
        source=OIDC_SOURCE,
    )
