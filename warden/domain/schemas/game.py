"""Pydantic schemas for catalog entries."""

from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

from warden.domain.schemas.base import CamelModel

# games.id and games.order are 32-bit integer columns
INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1


def is_valid_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return bool(parsed.scheme and parsed.netloc)


def _required_text(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise ValueError(message)
    return value


def _required_url(value: Optional[str], message: str) -> str:
    if value is None or not is_valid_url(value):
        raise ValueError(message)
    return value


def _optional_url(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not is_valid_url(value):
        raise ValueError("Trailer must be a valid URL")
    return value


class GameCreate(CamelModel):
    title: str
    image_url: str
    download_url: str
    category: str = Field(max_length=50)
    developer: Optional[str] = None
    description: Optional[str] = None
    youtube_url: Optional[str] = None
    order: int = Field(default=0, ge=INT4_MIN, le=INT4_MAX)

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return _required_text(v, "Title is required")

    @field_validator("image_url")
    @classmethod
    def image_url_valid(cls, v):
        return _required_url(v, "Valid image URL is required")

    @field_validator("download_url")
    @classmethod
    def download_url_valid(cls, v):
        return _required_url(v, "Valid download URL is required")

    @field_validator("category")
    @classmethod
    def category_required(cls, v):
        return _required_text(v, "Category is required")

    @field_validator("youtube_url")
    @classmethod
    def youtube_url_valid(cls, v):
        return _optional_url(v)


class GameUpdate(CamelModel):
    """Partial update. Validators only run on fields the client actually sent."""

    title: Optional[str] = None
    image_url: Optional[str] = None
    download_url: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=50)
    developer: Optional[str] = None
    description: Optional[str] = None
    youtube_url: Optional[str] = None
    order: Optional[int] = Field(default=None, ge=INT4_MIN, le=INT4_MAX)

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return _required_text(v, "Title is required")

    @field_validator("image_url")
    @classmethod
    def image_url_valid(cls, v):
        return _required_url(v, "Valid image URL is required")

    @field_validator("download_url")
    @classmethod
    def download_url_valid(cls, v):
        return _required_url(v, "Valid download URL is required")

    @field_validator("category")
    @classmethod
    def category_required(cls, v):
        return _required_text(v, "Category is required")

    @field_validator("youtube_url")
    @classmethod
    def youtube_url_valid(cls, v):
        return _optional_url(v)

    @field_validator("order")
    @classmethod
    def order_not_null(cls, v):
        if v is None:
            raise ValueError("Order must be an integer")
        return v


class GameRead(CamelModel):
    id: int
    title: str
    image_url: str
    download_url: str
    category: str
    developer: Optional[str] = None
    description: Optional[str] = None
    youtube_url: Optional[str] = None
    order: int = 0


class GameFilter(BaseModel):
    category: Optional[str] = None
    search: Optional[str] = None


class ReorderItem(BaseModel):
    id: int = Field(ge=INT4_MIN, le=INT4_MAX)
    order: int = Field(ge=INT4_MIN, le=INT4_MAX)


class ReorderRequest(BaseModel):
    orders: list[ReorderItem]
