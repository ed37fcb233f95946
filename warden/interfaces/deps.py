"""
API Dependencies: repositories, the session manager and the OIDC registry.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from warden.application.services.session_service import SessionManager
from warden.config import Settings, get_settings
from warden.domain.repositories.credential_repository import AdminRepository, UserRepository
from warden.domain.repositories.game_repository import GameRepository
from warden.infrastructure.database import get_db
from warden.infrastructure.oidc import OIDCRegistry
from warden.infrastructure.repositories.credential_repository import (
    SQLAlchemyAdminRepository,
    SQLAlchemyUserRepository,
)
from warden.infrastructure.repositories.game_repository import SQLAlchemyGameRepository
from warden.infrastructure.repositories.session_repository import SQLAlchemySessionRepository


def get_settings_dep() -> Settings:
    return get_settings()


def get_game_repository(db: Session = Depends(get_db)) -> GameRepository:
    return SQLAlchemyGameRepository(db)


def get_admin_repository(db: Session = Depends(get_db)) -> AdminRepository:
    return SQLAlchemyAdminRepository(db)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return SQLAlchemyUserRepository(db)


def get_session_manager(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> SessionManager:
    return SessionManager(SQLAlchemySessionRepository(db), settings)


def get_oidc_registry(request: Request) -> OIDCRegistry:
    return request.app.state.oidc_registry
