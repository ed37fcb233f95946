"""Create (or reset) the primary super-admin credential.

Usage: python scripts/create_super_admin.py [email]
The password is read from PRIMARY_ADMIN_PASSWORD, or prompted for.
"""

import getpass
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from warden.application.services.auth_service import hash_password, normalize_email
from warden.config import get_settings
from warden.infrastructure.database import Base, SessionLocal, engine
from warden.infrastructure.repositories.credential_repository import SQLAlchemyAdminRepository
import warden.domain.models  # noqa: F401


def create_super_admin(email: str, password: str) -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        admins = SQLAlchemyAdminRepository(db)
        existing = admins.get_by_email(email)
        if existing:
            existing.is_super_admin = True
            admins.set_password_hash(existing, hash_password(password))
            print(f"Super admin {email} updated.")
        else:
            admins.create({"email": email, "password_hash": hash_password(password), "is_super_admin": True})
            print(f"Super admin {email} created.")
    except Exception as e:
        db.rollback()
        print(f"Could not create super admin: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    settings = get_settings()
    email = normalize_email(sys.argv[1] if len(sys.argv) > 1 else settings.PRIMARY_ADMIN_EMAIL)
    password = settings.PRIMARY_ADMIN_PASSWORD or getpass.getpass(f"Password for {email}: ")
    if len(password) < 6:
        print("Password must be at least 6 characters long.")
        sys.exit(1)
    create_super_admin(email, password)
