"""
SQLAlchemy Implementation of the session store.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from warden.domain.models.session import SessionRecord
from warden.domain.repositories.session_repository import SessionRepository


class SQLAlchemySessionRepository(SessionRepository):

    def __init__(self, db: Session):
        self.db = db

    def get(self, sid: str) -> Optional[SessionRecord]:
        return self.db.get(SessionRecord, sid)

    def save(self, sid: str, data: dict, expire: datetime) -> SessionRecord:
        record = self.db.get(SessionRecord, sid)
        if record is None:
            record = SessionRecord(sid=sid, sess=data, expire=expire)
            self.db.add(record)
        else:
            record.sess = data
            record.expire = expire
        self.db.commit()
        return record

    def delete(self, sid: str) -> None:
        self.db.execute(delete(SessionRecord).where(SessionRecord.sid == sid))
        self.db.commit()

    def purge_expired(self, now: datetime) -> int:
        result = self.db.execute(delete(SessionRecord).where(SessionRecord.expire <= now))
        self.db.commit()
        return result.rowcount
