"""User-related schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from lp.models import UserRole
from lp.schemas.common import CamelModel, require_text


class User(CamelModel):
    """Full account, returned to its owner."""

    id: UUID
    name: str
    email: str
    image: Optional[str] = None
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserProfile(CamelModel):
    """Public profile visible to other signed-in users."""

    id: UUID
    name: str
    image: Optional[str] = None


class UserProfileList(CamelModel):
    items: List[UserProfile]


class UserUpdate(CamelModel):
    """Profile update request."""

    name: Optional[str] = Field(default=None, max_length=255)
    image: Optional[str] = Field(default=None, max_length=2048)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else require_text(value, "Name")
