"""Import every model so ``Base.metadata`` knows all tables."""

from warden.domain.models.admin import Admin
from warden.domain.models.game import Game
from warden.domain.models.session import SessionRecord
from warden.domain.models.user import User

__all__ = ["Admin", "Game", "SessionRecord", "User"]
