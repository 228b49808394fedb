"""Category schemas."""

from typing import List, Optional
from uuid import UUID

from pydantic import Field

from lp.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=100)


class Category(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None


class CategoryList(CamelModel):
    items: List[Category]
