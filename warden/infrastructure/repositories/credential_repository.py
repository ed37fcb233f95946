"""
SQLAlchemy Implementations of the admin and user repositories.
"""

from typing import Optional

from sqlalchemy import delete, func, update
from sqlalchemy.orm import Session

from warden.domain.models.admin import Admin
from warden.domain.models.user import User
from warden.domain.repositories.credential_repository import AdminRepository, UserRepository
from warden.infrastructure.repositories.base_repository import SQLAlchemyRepository


def _email_key(email: str) -> str:
    return (email or "").strip().lower()


class SQLAlchemyAdminRepository(SQLAlchemyRepository[Admin], AdminRepository):

    def __init__(self, db: Session):
        super().__init__(db, Admin)

    def list(self):
        return self.db.query(Admin).order_by(Admin.created_at.asc(), Admin.email.asc()).all()

    def get_by_email(self, email: str) -> Optional[Admin]:
        return self.db.query(Admin).filter(func.lower(Admin.email) == _email_key(email)).first()

    def set_password_hash(self, admin: Admin, password_hash: str) -> Admin:
        admin.password_hash = password_hash
        self.db.commit()
        self.db.refresh(admin)
        return admin

    def delete_by_email(self, email: str) -> bool:
        result = self.db.execute(delete(Admin).where(func.lower(Admin.email) == _email_key(email)))
        self.db.commit()
        return result.rowcount > 0


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == _email_key(email)).first()

    def upsert(self, user_data: dict) -> User:
        user = self.db.get(User, user_data["id"])
        if user is None:
            user = User(**user_data)
            self.db.add(user)
        else:
            for field, value in user_data.items():
                setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_admin_flag(self, email: str, is_admin: bool) -> int:
        result = self.db.execute(update(User).where(func.lower(User.email) == _email_key(email)).values(is_admin=is_admin))
        self.db.commit()
        return result.rowcount
