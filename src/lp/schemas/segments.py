"""Segment schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from lp.schemas.common import CamelModel, as_utc, require_text
from lp.schemas.tasks import Task


class SegmentDraft(CamelModel):
    """Segment fields without the parent plan reference."""

    title: str = Field(max_length=255)
    description: Optional[str] = None
    start: datetime
    end: Optional[datetime] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_required(cls, value):
        return require_text(value) if value is None or isinstance(value, str) else value

    @field_validator("start", "end")
    @classmethod
    def _normalize(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @field_validator("end")
    @classmethod
    def _end_after_start(
        cls, value: Optional[datetime], info: ValidationInfo
    ) -> Optional[datetime]:
        start = info.data.get("start")
        if value is not None and start is not None and value < start:
            raise PydanticCustomError("end_before_start", "End must not be before start")
        return value


class SegmentCreate(SegmentDraft):
    """Standalone segment payload."""

    learning_plan_id: UUID


class Segment(CamelModel):
    """Segment response without tasks."""

    id: UUID
    learning_plan_id: UUID
    title: str
    description: Optional[str] = None
    start: datetime
    end: Optional[datetime] = None
    position: int
    created_at: datetime
    updated_at: datetime


class SegmentDetail(Segment):
    """Segment response with its tasks in order."""

    tasks: List[Task] = []
