"""Warden — Configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./warden.db"

    # Sessions
    SESSION_SECRET: str = "warden-secret"
    SESSION_COOKIE_NAME: str = "connect.sid"
    SESSION_COOKIE_SECURE: bool = True
    SESSION_TTL_SECONDS: int = 7 * 24 * 60 * 60  # 1 week
    ADMIN_SESSION_SECONDS: int = 60 * 60

    # External identity provider (OpenID Connect)
    ISSUER_URL: str = "https://replit.com/oidc"
    OIDC_CLIENT_ID: str = Field(default="", validation_alias=AliasChoices("OIDC_CLIENT_ID", "REPL_ID"))
    OIDC_CLIENT_SECRET: str = ""
    OIDC_SCOPES: str = "openid email profile offline_access"
    OIDC_DISCOVERY_TTL_SECONDS: int = 60 * 60
    OIDC_HTTP_TIMEOUT_SECONDS: float = 10.0

    # Primary admin (bootstrap credential, can never be removed)
    PRIMARY_ADMIN_EMAIL: str = "aaryabpandey@gmail.com"
    PRIMARY_ADMIN_PASSWORD: str = ""  # empty disables the password fallback

    # HTTP
    CORS_ORIGINS: str = "http://localhost:5000,http://localhost:3000"

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
