"""FastAPI application — main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from warden.application.services.seed_service import seed_catalog
from warden.application.services.session_service import SessionManager
from warden.config import get_settings
from warden.core.exceptions import register_exception_handlers
from warden.core.logging import configure_logging
from warden.core.middleware import setup_middleware
from warden.infrastructure.database import Base, SessionLocal, engine
from warden.infrastructure.oidc import OIDCRegistry
from warden.infrastructure.repositories.game_repository import SQLAlchemyGameRepository
from warden.infrastructure.repositories.session_repository import SQLAlchemySessionRepository

# Import all models so SQLAlchemy knows about them
import warden.domain.models  # noqa: F401

# Import routers
from warden.interfaces.api.admins import router as admins_router
from warden.interfaces.api.auth import router as auth_router
from warden.interfaces.api.games import router as games_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Warden catalog...", env=settings.ENVIRONMENT)

    # Create DB tables (no migration tooling)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    db = SessionLocal()
    try:
        purged = SessionManager(SQLAlchemySessionRepository(db), settings).purge_expired()
        if purged:
            logger.info("Expired sessions purged", count=purged)
        seed_catalog(SQLAlchemyGameRepository(db))
    finally:
        db.close()

    yield

    logger.info("Warden catalog stopped")


app = FastAPI(
    title="Warden — Game & Software Catalog",
    description="Catalog API with password and OpenID Connect admin sessions",
    version="1.0.0",
    lifespan=lifespan,
)

# One registry per app: hostname -> identity provider client
app.state.oidc_registry = OIDCRegistry(settings)

setup_middleware(app)
register_exception_handlers(app)

app.include_router(games_router)
app.include_router(auth_router)
app.include_router(admins_router)


@app.get("/health")
def health():
    return {"status": "healthy"}
