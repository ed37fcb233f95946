"""
SQLAlchemy Implementation of Game Repository.
"""

from typing import List

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from warden.domain.models.game import ALL_CATEGORIES, Game
from warden.domain.repositories.game_repository import GameRepository
from warden.domain.schemas.game import GameFilter
from warden.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyGameRepository(SQLAlchemyRepository[Game], GameRepository):
    """Catalog repository implementation using SQLAlchemy."""

    def __init__(self, db: Session):
        super().__init__(db, Game)

    def get_with_filters(self, filters: GameFilter) -> List[Game]:
        query = self.db.query(Game)

        if filters.category and filters.category != ALL_CATEGORIES:
            query = query.filter(Game.category == filters.category)
        if filters.search:
            query = query.filter(Game.title.icontains(filters.search, autoescape=True))

        return query.order_by(Game.order.desc(), Game.id.asc()).all()

    def set_order(self, id: int, order: int) -> bool:
        result = self.db.execute(update(Game).where(Game.id == id).values(order=order))
        self.db.commit()
        return result.rowcount > 0

    def count(self) -> int:
        return self.db.query(func.count(Game.id)).scalar() or 0
