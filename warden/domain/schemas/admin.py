"""Pydantic schemas for admin management."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from warden.domain.schemas.base import CamelModel


class AdminCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class AdminCreated(BaseModel):
    id: str
    email: str


class AdminRead(CamelModel):
    """Admin row as exposed over the API. The password hash never leaves the server."""

    id: str
    email: str
    is_super_admin: bool = False
    created_at: Optional[datetime] = None


class PromoteRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RemoveRequest(BaseModel):
    email: Optional[str] = None
