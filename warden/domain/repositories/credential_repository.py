"""
Credential Repository Interfaces.
Admins (password credentials) and users (identity-provider accounts) are
separate stores that only meet by email.
"""

from typing import Optional

from warden.domain.models.admin import Admin
from warden.domain.models.user import User
from warden.domain.repositories.base import BaseRepository


class AdminRepository(BaseRepository[Admin]):
    """Interface for admin credential operations."""

    def get_by_email(self, email: str) -> Optional[Admin]:
        ...

    def set_password_hash(self, admin: Admin, password_hash: str) -> Admin:
        ...

    def delete_by_email(self, email: str) -> bool:
        """Delete the admin with this email. Returns False if none existed."""
        ...


class UserRepository(BaseRepository[User]):
    """Interface for identity-provider user operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def upsert(self, user_data: dict) -> User:
        """Insert or update a user keyed by ``id``."""
        ...

    def set_admin_flag(self, email: str, is_admin: bool) -> int:
        """Set ``is_admin`` on users with this email. Returns rows touched."""
        ...
