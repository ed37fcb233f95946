"""Game service: business logic for the catalog."""

from typing import Iterable, List

import structlog
from sqlalchemy.exc import SQLAlchemyError

from warden.core.exceptions import EntityNotFoundException, InternalError
from warden.domain.models.game import Game
from warden.domain.repositories.game_repository import GameRepository
from warden.domain.schemas.auth import Principal
from warden.domain.schemas.game import GameCreate, GameFilter, GameUpdate, ReorderItem

logger = structlog.get_logger(__name__)


def list_games(repo: GameRepository, filters: GameFilter) -> List[Game]:
    """Filter by category (``All`` means any) and title substring, highest order first."""
    return repo.get_with_filters(filters)


def get_game(repo: GameRepository, game_id: int) -> Game:
    game = repo.get_by_id(game_id)
    if game is None:
        raise EntityNotFoundException("Game not found")
    return game


def create_game(repo: GameRepository, data: GameCreate, actor: Principal) -> Game:
    game = repo.create(data.model_dump())
    logger.info("Game created", game_id=game.id, actor_id=actor.id)
    return game


def update_game(repo: GameRepository, game_id: int, data: GameUpdate, actor: Principal) -> Game:
    game = get_game(repo, game_id)
    updated = repo.update(game, data.model_dump(exclude_unset=True))
    logger.info("Game updated", game_id=game_id, actor_id=actor.id)
    return updated


def delete_game(repo: GameRepository, game_id: int, actor: Principal) -> None:
    deleted = repo.delete(game_id)
    logger.info("Game deleted", game_id=game_id, existed=deleted is not None, actor_id=actor.id)


def reorder_games(repo: GameRepository, orders: Iterable[ReorderItem], actor: Principal) -> int:
    """Apply display orders one entry at a time.

    Not transactional: if a write fails midway, earlier items stay applied.
    Unknown ids are skipped. Returns how many entries were updated.
    """
    applied = 0
    for item in orders:
        try:
            if repo.set_order(item.id, item.order):
                applied += 1
        except SQLAlchemyError as exc:
            logger.exception("Reorder failed", game_id=item.id, applied=applied, actor_id=actor.id)
            raise InternalError("Failed to reorder games") from exc
    logger.info("Games reordered", applied=applied, actor_id=actor.id)
    return applied
