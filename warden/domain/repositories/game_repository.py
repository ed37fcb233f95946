"""
Game Repository Interface.
Defines catalog-specific data access operations.
"""

from typing import List

from warden.domain.models.game import Game
from warden.domain.repositories.base import BaseRepository
from warden.domain.schemas.game import GameFilter


class GameRepository(BaseRepository[Game]):
    """Interface for catalog operations."""

    def get_with_filters(self, filters: GameFilter) -> List[Game]:
        """List entries matching the filters, highest display order first."""
        ...

    def set_order(self, id: int, order: int) -> bool:
        """Set one entry's display order. Returns False if the entry does not exist."""
        ...

    def count(self) -> int:
        """Number of catalog entries."""
        ...
