"""Server-side session record, keyed by the id carried in the session cookie."""

from sqlalchemy import Column, String, DateTime, JSON, Index

from warden.infrastructure.database import Base


class SessionRecord(Base):
    __tablename__ = "sessions"

    sid = Column(String(128), primary_key=True)
    sess = Column(JSON, nullable=False)
    expire = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("IDX_session_expire", "expire"),)

    def __repr__(self):
        return f"<SessionRecord {self.sid[:8]}... expires {self.expire}>"
