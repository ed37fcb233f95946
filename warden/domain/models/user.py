"""People who signed in through the identity provider."""

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from warden.infrastructure.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)  # provider subject id
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    profile_image_url = Column(String(1000), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.email}>"
