"""Pydantic schemas for login, principals and identity-provider users."""

import time
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from warden.domain.schemas.base import CamelModel

PASSWORD_SOURCE = "password"
OIDC_SOURCE = "oidc"


class LoginRequest(BaseModel):
    email: str
    password: str


class Principal(CamelModel):
    """The authenticated identity attached to a session.

    ``id`` is the admin row id (or ``primary-admin``) for password logins and
    the provider subject id for identity-provider logins. ``expires_at`` is a
    unix timestamp in seconds.
    """

    id: str
    email: Optional[str] = None
    is_admin: bool = False
    is_super_admin: bool = False
    expires_at: int
    source: Literal["password", "oidc"] = PASSWORD_SOURCE

    def is_expired(self, now: Optional[float] = None) -> bool:
        return (now if now is not None else time.time()) >= self.expires_at


class UserRead(CamelModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IdentityClaims(BaseModel):
    """Verified claims from the identity provider's id token."""

    sub: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    exp: int

    model_config = {"extra": "allow"}
