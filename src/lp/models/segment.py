"""Segment model."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from lp.db.base import Base


class Segment(Base):
    """Time-bounded phase of a learning plan."""

    __tablename__ = "segments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    learning_plan_id = Column(
        UUID(as_uuid=True), ForeignKey("learning_plans.id"), nullable=False
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start = Column(DateTime(timezone=True), nullable=False)
    end = Column(DateTime(timezone=True), nullable=True)
    position = Column(Integer, nullable=False, default=0)
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
    plan = relationship("LearningPlan", back_populates="segments")
    tasks = relationship(
        "Task",
        back_populates="segment",
        order_by="Task.position",
    )

    __table_args__ = (
        Index("idx_segments_plan_position", "learning_plan_id", "position"),
    )
