"""Games API routes — public listing, admin CRUD and reordering."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, status

from warden.application.services import game_service
from warden.domain.repositories.game_repository import GameRepository
from warden.domain.schemas.auth import Principal
from warden.domain.schemas.base import MessageResponse
from warden.domain.schemas.game import INT4_MAX, GameCreate, GameFilter, GameRead, GameUpdate, ReorderRequest
from warden.interfaces.api.deps import require_admin
from warden.interfaces.deps import get_game_repository

router = APIRouter(prefix="/api/games", tags=["Games"])

GameId = Annotated[int, Path(ge=1, le=INT4_MAX)]


@router.get("", response_model=List[GameRead])
def list_games(
    category: Optional[str] = None,
    search: Optional[str] = None,
    repo: GameRepository = Depends(get_game_repository),
):
    filters = GameFilter(category=category, search=search)
    return [GameRead.model_validate(g) for g in game_service.list_games(repo, filters)]


@router.post("/reorder", response_model=MessageResponse)
def reorder_games(
    body: ReorderRequest,
    repo: GameRepository = Depends(get_game_repository),
    admin: Principal = Depends(require_admin),
):
    game_service.reorder_games(repo, body.orders, admin)
    return MessageResponse(message="Order updated")


@router.get("/{game_id}", response_model=GameRead)
def get_game(game_id: GameId, repo: GameRepository = Depends(get_game_repository)):
    return GameRead.model_validate(game_service.get_game(repo, game_id))


@router.post("", response_model=GameRead, status_code=status.HTTP_201_CREATED)
def create_game(
    body: GameCreate,
    repo: GameRepository = Depends(get_game_repository),
    admin: Principal = Depends(require_admin),
):
    return GameRead.model_validate(game_service.create_game(repo, body, admin))


@router.patch("/{game_id}", response_model=GameRead)
def update_game(
    game_id: GameId,
    body: GameUpdate,
    repo: GameRepository = Depends(get_game_repository),
    admin: Principal = Depends(require_admin),
):
    return GameRead.model_validate(game_service.update_game(repo, game_id, body, admin))


@router.delete("/{game_id}", response_model=MessageResponse)
def delete_game(
    game_id: GameId,
    repo: GameRepository = Depends(get_game_repository),
    admin: Principal = Depends(require_admin),
):
    game_service.delete_game(repo, game_id, admin)
    return MessageResponse(message="Game deleted successfully")
