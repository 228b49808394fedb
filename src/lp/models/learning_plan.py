"""Learning plan model."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from lp.db.base import Base

# JSONB for Postgres with JSON fallback
JSONType = JSON().with_variant(JSONB, "postgresql")


class LearningPlan(Base):
    """Top-level plan owned by a single user."""

    __tablename__ = "learning_plans"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    objectives = Column(JSONType, nullable=False, default=list)
    tags = Column(JSONType, nullable=False, default=list)
    # Embedded {"name": ..., "icon": ...}
    category = Column(JSONType, nullable=False)
    resource_ids = Column(JSONType, nullable=False, default=list)
    is_public = Column(Boolean, nullable=False, default=False)
    start = Column(DateTime(timezone=True), nullable=True)
    end = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    owner = relationship("User", back_populates="plans")
    segments = relationship(
        "Segment",
        back_populates="plan",
        order_by="Segment.position",
    )

    __table_args__ = (
        Index("idx_learning_plans_owner", "owner_id"),
        Index("idx_learning_plans_public", "is_public", "updated_at"),
    )
