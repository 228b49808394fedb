"""Task service."""

import logging
from typing import Any, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lp.auth import Caller
from lp.errors import NotFound, ReferentialIntegrityFailure, ValidationFailed
from lp.models import LearningPlan, Segment, Task
from lp.services.access import ensure_readable, ensure_writable
from lp.validation import validate_task

logger = logging.getLogger(__name__)


class TaskService:
    """Create, read, update and delete tasks inside a segment."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _writable_segment(
        self, caller: Optional[Caller], segment_id: UUID
    ) -> Tuple[Segment, LearningPlan]:
        segment = await self.db.get(Segment, segment_id)
        if segment is None:
            raise ReferentialIntegrityFailure("Segment does not exist")
        plan = await self.db.get(LearningPlan, segment.learning_plan_id)
        ensure_writable(caller, plan)
        return segment, plan

    async def _next_position(self, segment_id: UUID) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Task.position), -1) + 1).where(
                Task.segment_id == segment_id
            )
        )
        return result.scalar_one()

    async def create_task(self, caller: Optional[Caller], payload: Any) -> Task:
        result = validate_task(payload)
        if not result.ok:
            raise ValidationFailed(result.issues)
        data = result.value

        await self._writable_segment(caller, data.segment_id)
        task = Task(position=await self._next_position(data.segment_id), **data.model_dump())
        self.db.add(task)
        await self.db.commit()
        await self.db.refresh(task)

        logger.info("Created task %s in segment %s", task.id, data.segment_id)
        return task

    async def get_task(self, caller: Optional[Caller], task_id: UUID) -> Task:
        task = await self.db.get(Task, task_id)
        if task is None:
            raise NotFound("Task not found")
        segment = await self.db.get(Segment, task.segment_id)
        plan = await self.db.get(LearningPlan, segment.learning_plan_id)
        ensure_readable(caller, plan)
        return task

    async def update_task(
        self, caller: Optional[Caller], task_id: UUID, payload: Any
    ) -> Task:
        task = await self.db.get(Task, task_id)
        if task is None:
            raise NotFound("Task not found")
        await self._writable_segment(caller, task.segment_id)

        result = validate_task(payload)
        if not result.ok:
            raise ValidationFailed(result.issues)
        data = result.value

        if data.segment_id != task.segment_id:
            await self._writable_segment(caller, data.segment_id)
            task.position = await self._next_position(data.segment_id)

        for key, value in data.model_dump().items():
            setattr(task, key, value)
        await self.db.commit()
        await self.db.refresh(task)
        return task

    async def delete_task(self, caller: Optional[Caller], task_id: UUID) -> None:
        task = await self.db.get(Task, task_id)
        if task is None:
            raise NotFound("Task not found")
        await self._writable_segment(caller, task.segment_id)

        await self.db.execute(delete(Task).where(Task.id == task_id))
        await self.db.commit()
        logger.info("Deleted task %s", task_id)
