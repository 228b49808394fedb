"""Segment service."""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lp.auth import Caller
from lp.errors import (
    InternalError,
    NotFound,
    ReferentialIntegrityFailure,
    ValidationFailed,
)
from lp.models import LearningPlan, Segment
from lp.services.access import ensure_readable, ensure_writable
from lp.services.cascade import CascadeResult, delete_segments
from lp.validation import validate_segment

logger = logging.getLogger(__name__)


class SegmentService:
    """Create, read, update and delete segments inside a plan."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _writable_plan(self, caller: Optional[Caller], plan_id: UUID) -> LearningPlan:
        plan = await self.db.get(LearningPlan, plan_id)
        if plan is None:
            raise ReferentialIntegrityFailure("Learning plan does not exist")
        ensure_writable(caller, plan)
        return plan

    async def _next_position(self, plan_id: UUID) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Segment.position), -1) + 1).where(
                Segment.learning_plan_id == plan_id
            )
        )
        return result.scalar_one()

    async def load_segment(self, segment_id: UUID) -> Optional[Segment]:
        result = await self.db.execute(
            select(Segment)
            .where(Segment.id == segment_id)
            .options(selectinload(Segment.tasks))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_segment(self, caller: Optional[Caller], payload: Any) -> Segment:
        result = validate_segment(payload)
        if not result.ok:
            raise ValidationFailed(result.issues)
        data = result.value

        await self._writable_plan(caller, data.learning_plan_id)
        segment = Segment(
            position=await self._next_position(data.learning_plan_id),
            **data.model_dump(),
        )
        self.db.add(segment)
        await self.db.commit()

        logger.info("Created segment %s in plan %s", segment.id, data.learning_plan_id)
        return await self.load_segment(segment.id)

    async def get_segment(self, caller: Optional[Caller], segment_id: UUID) -> Segment:
        segment = await self.load_segment(segment_id)
        if segment is None:
            raise NotFound("Segment not found")
        plan = await self.db.get(LearningPlan, segment.learning_plan_id)
        ensure_readable(caller, plan)
        return segment

    async def update_segment(
        self, caller: Optional[Caller], segment_id: UUID, payload: Any
    ) -> Segment:
        segment = await self.db.get(Segment, segment_id)
        if segment is None:
            raise NotFound("Segment not found")
        await self._writable_plan(caller, segment.learning_plan_id)

        result = validate_segment(payload)
        if not result.ok:
            raise ValidationFailed(result.issues)
        data = result.value

        if data.learning_plan_id != segment.learning_plan_id:
            # Moving to another plan needs write access there too
            await self._writable_plan(caller, data.learning_plan_id)
            segment.position = await self._next_position(data.learning_plan_id)

        for key, value in data.model_dump().items():
            setattr(segment, key, value)
        await self.db.commit()

        return await self.load_segment(segment_id)

    async def delete_segment(
        self, caller: Optional[Caller], segment_id: UUID
    ) -> CascadeResult:
        """Delete a segment and its own tasks."""
        segment = await self.db.get(Segment, segment_id)
        if segment is None:
            raise NotFound("Segment not found")
        await self._writable_plan(caller, segment.learning_plan_id)

        try:
            result = await delete_segments(self.db, [segment_id])
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("Failed to delete segment %s", segment_id)
            raise InternalError("Failed to delete segment") from exc

        logger.info("Deleted segment %s with %d tasks", segment_id, result.tasks)
        return result
