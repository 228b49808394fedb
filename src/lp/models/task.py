"""Task model."""

import enum
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from lp.db.base import Base


class TaskPriority(enum.Enum):
    """Priority of a task within its segment."""

    high = "high"
    medium = "medium"
    low = "low"


class Task(Base):
    """Atomic unit of work within a segment."""

    __tablename__ = "tasks"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    segment_id = Column(
        UUID(as_uuid=True), ForeignKey("segments.id"), nullable=False
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(50), nullable=True)
    priority = Column(
        Enum(TaskPriority, name="task_priority"),
        nullable=False,
        default=TaskPriority.medium,
    )
    is_complete = Column(Boolean, nullable=False, default=False)
    # Lives in the resource catalog, so no foreign key
    assigned_resource_id = Column(UUID(as_uuid=True), nullable=True)
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
    segment = relationship("Segment", back_populates="tasks")

    __table_args__ = (
        Index("idx_tasks_segment_position", "segment_id", "position"),
    )
