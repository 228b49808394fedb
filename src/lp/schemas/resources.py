"""Resource catalog schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from lp.schemas.common import CamelModel


class Resource(CamelModel):
    """Learning material from the aggregated catalog."""

    id: UUID
    title: str
    description: Optional[str] = None
    tags: List[str] = []
    source: Optional[str] = None
    content_type: Optional[str] = None
    url: Optional[str] = None
    provider: Optional[str] = None
    difficulty: Optional[str] = None
    instructors: List[str] = []
    updated_at: datetime
    score: Optional[float] = None


class ResourceList(CamelModel):
    items: List[Resource]
