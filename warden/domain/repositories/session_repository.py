"""
Session Repository Interface.
Persisted session rows shared by every worker process.
"""

from datetime import datetime
from typing import Optional, Protocol

from warden.domain.models.session import SessionRecord


class SessionRepository(Protocol):

    def get(self, sid: str) -> Optional[SessionRecord]:
        ...

    def save(self, sid: str, data: dict, expire: datetime) -> SessionRecord:
        """Insert or replace the session row."""
        ...

    def delete(self, sid: str) -> None:
        ...

    def purge_expired(self, now: datetime) -> int:
        """Delete every session whose expiry has passed. Returns rows removed."""
        ...
