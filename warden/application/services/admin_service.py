"""Admin management: promote, remove, list and create password admins."""

from typing import List, Optional

import structlog

from warden.application.services.auth_service import hash_password, is_primary_admin, normalize_email
from warden.config import Settings
from warden.core.exceptions import ProtectedResourceException, ValidationError
from warden.domain.models.admin import Admin
from warden.domain.repositories.credential_repository import AdminRepository, UserRepository
from warden.domain.schemas.auth import Principal

logger = structlog.get_logger(__name__)


def _require_email(email: Optional[str]) -> str:
    email = normalize_email(email)
    if not email:
        raise ValidationError("Email required")
    return email


def list_admins(admins: AdminRepository) -> List[Admin]:
    return admins.list()


def create_admin(admins: AdminRepository, email: str, password: str, actor: Principal) -> Admin:
    """Create a regular (non-super) admin with a hashed password."""
    email = normalize_email(email)
    if admins.get_by_email(email) is not None:
        raise ValidationError("Admin already exists")

    admin = admins.create(
        {"email": email, "password_hash": hash_password(password), "is_super_admin": False}
    )
    logger.info("Admin created", admin_id=admin.id, actor_id=actor.id)
    return admin


def promote(
    admins: AdminRepository,
    users: UserRepository,
    email: Optional[str],
    password: Optional[str],
    actor: Principal,
) -> str:
    """Give ``email`` admin rights.

    A matching identity-provider user gets its admin flag set. A password
    credential is created if none exists (a password is then mandatory), or
    its hash is replaced when a new password is supplied.
    """
    email = _require_email(email)

    admin = admins.get_by_email(email)
    if admin is None and not password:
        raise ValidationError("Password required for new admin")

    if users.get_by_email(email) is not None:
        users.set_admin_flag(email, True)

    if admin is None:
        admins.create({"email": email, "password_hash": hash_password(password)})
        logger.info("Admin credential created by promotion", actor_id=actor.id)
    elif password:
        admins.set_password_hash(admin, hash_password(password))
        logger.info("Admin password replaced by promotion", admin_id=admin.id, actor_id=actor.id)

    return f"User {email} promoted/created as admin successfully"


def remove(
    admins: AdminRepository,
    users: UserRepository,
    email: Optional[str],
    actor: Principal,
    settings: Settings,
) -> str:
    """Revoke admin rights. Removing an admin that does not exist is a no-op."""
    email = _require_email(email)
    if is_primary_admin(email, settings):
        logger.warning("Attempt to remove primary admin", actor_id=actor.id)
        raise ProtectedResourceException("Cannot remove primary admin")

    deleted = admins.delete_by_email(email)
    users.set_admin_flag(email, False)
    logger.info("Admin removed", actor_id=actor.id, credential_deleted=deleted)
    return f"Admin {email} removed successfully"
