"""Task schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, Field, field_validator

from lp.models import TaskPriority
from lp.schemas.common import CamelModel, require_text


class TaskDraft(CamelModel):
    """Task fields without the parent segment reference."""

    title: str = Field(max_length=255)
    description: Optional[str] = None
    type: Optional[str] = Field(default=None, max_length=50)
    assigned_resource_id: Optional[UUID] = Field(default=None, alias="assignedResource")
    is_complete: bool = False
    priority: TaskPriority = TaskPriority.medium

    @field_validator("title", mode="before")
    @classmethod
    def _title_required(cls, value):
        return require_text(value) if value is None or isinstance(value, str) else value


class TaskCreate(TaskDraft):
    """Standalone task payload."""

    segment_id: UUID


class Task(CamelModel):
    """Task response."""

    id: UUID
    segment_id: UUID
    title: str
    description: Optional[str] = None
    type: Optional[str] = None
    assigned_resource_id: Optional[UUID] = Field(
        default=None,
        validation_alias=AliasChoices("assigned_resource_id", "assignedResource"),
        serialization_alias="assignedResource",
    )
    is_complete: bool
    priority: TaskPriority
    position: int
    created_at: datetime
    updated_at: datetime
