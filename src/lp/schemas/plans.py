"""Learning plan schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, Field, field_validator

from lp.schemas.common import CamelModel, as_utc, require_text
from lp.schemas.segments import SegmentDetail


class CategoryRef(CamelModel):
    """Category embedded in a plan."""

    name: str
    icon: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_required(cls, value):
        if value is None or isinstance(value, str):
            return require_text(value, "Category name")
        return value


class PlanCreate(CamelModel):
    """Plan payload; ``owner`` is always injected from the caller."""

    title: str = Field(max_length=255)
    description: Optional[str] = None
    owner_id: UUID = Field(alias="owner")
    objectives: List[str] = []
    tags: List[str] = []
    category: CategoryRef
    resource_ids: List[UUID] = Field(default=[], alias="resources")
    is_public: bool = False
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_required(cls, value):
        return require_text(value) if value is None or isinstance(value, str) else value

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    @field_validator("start", "end")
    @classmethod
    def _normalize(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class PlanSummary(CamelModel):
    """Plan as returned by list and search."""

    id: UUID
    title: str
    description: Optional[str] = None
    owner_id: UUID = Field(
        validation_alias=AliasChoices("owner_id", "owner"), serialization_alias="owner"
    )
    objectives: List[str] = []
    tags: List[str] = []
    category: CategoryRef
    resource_ids: List[UUID] = Field(
        default=[],
        validation_alias=AliasChoices("resource_ids", "resources"),
        serialization_alias="resources",
    )
    is_public: bool
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    score: Optional[float] = None


class PlanDetail(PlanSummary):
    """Plan with its segments and their tasks."""

    segments: List[SegmentDetail] = []


class PlanList(CamelModel):
    items: List[PlanSummary]


class PlanCreated(CamelModel):
    plan_id: UUID
    message: str = "Learning plan created successfully"
