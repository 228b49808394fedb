"""Resource catalog model (secondary store)."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.types import JSON

from lp.db.base import ResourceBase

JSONType = JSON().with_variant(JSONB, "postgresql")


class Resource(ResourceBase):
    """Externally aggregated learning material."""

    __tablename__ = "resources"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    tags = Column(JSONType, nullable=False, default=list)
    source = Column(String(100), nullable=True)
    content_type = Column(String(50), nullable=True)
    url = Column(String(2048), nullable=True)
    provider = Column(String(255), nullable=True)
    difficulty = Column(String(50), nullable=True)
    instructors = Column(JSONType, nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )

    __table_args__ = (
        Index("idx_resources_content_type", "content_type"),
        Index("idx_resources_source", "source"),
    )
