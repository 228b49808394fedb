"""Learning plan composition, updates and cascading teardown."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lp.auth import Caller
from lp.errors import (
    InternalError,
    NotFound,
    ReferentialIntegrityFailure,
    ValidationFailed,
)
from lp.models import LearningPlan, Segment, Task, User
from lp.schemas.plans import PlanCreate
from lp.schemas.segments import SegmentDraft
from lp.schemas.tasks import TaskDraft
from lp.services.access import ensure_readable, ensure_writable
from lp.services.cascade import CascadeResult, delete_plans
from lp.validation import (
    ROOT,
    Err,
    FieldErrors,
    Ok,
    Result,
    add_issue,
    merge_issues,
    validate_plan,
    validate_segment,
    validate_task,
)

logger = logging.getLogger(__name__)


@dataclass
class SegmentBundle:
    segment: SegmentDraft
    tasks: List[TaskDraft] = field(default_factory=list)


@dataclass
class PlanBundle:
    """A validated plan with its segments and tasks, ready to insert."""

    plan: PlanCreate
    segments: List[SegmentBundle] = field(default_factory=list)

    @property
    def task_count(self) -> int:
        return sum(len(item.tasks) for item in self.segments)


def plan_values(data: PlanCreate) -> Dict[str, Any]:
    """Column values for a validated plan payload."""
    return {
        "title": data.title,
        "description": data.description,
        "owner_id": data.owner_id,
        "objectives": list(data.objectives),
        "tags": list(data.tags),
        "category": data.category.model_dump(),
        "resource_ids": [str(resource_id) for resource_id in data.resource_ids],
        "is_public": data.is_public,
        "start": data.start,
        "end": data.end,
    }


def _without_segments(payload: Any, owner_id: UUID) -> Any:
    if not isinstance(payload, Mapping):
        return payload
    data = {key: value for key, value in payload.items() if key != "segments"}
    data["owner"] = str(owner_id)
    return data


def validate_bundle(payload: Any, owner_id: UUID) -> Result:
    """Validate a plan with nested segments and tasks, collecting every error.

    Plan errors are reported at the top level, segment errors under
    ``segments.<i>`` and task errors under ``segments.<i>.tasks.<j>``. A task
    may be given as a bare string, which is taken as its title.
    """
    if not isinstance(payload, Mapping):
        return Err({ROOT: ["Expected an object"]})

    issues: FieldErrors = {}
    plan_result = validate_plan(_without_segments(payload, owner_id))
    if not plan_result.ok:
        issues.update(plan_result.issues)

    raw_segments = payload.get("segments")
    if raw_segments is None:
        raw_segments = []
    if not isinstance(raw_segments, list):
        add_issue(issues, ["segments"], "Expected a list of segments")
        raw_segments = []

    bundles: List[SegmentBundle] = []
    for i, raw_segment in enumerate(raw_segments):
        segment_result = validate_segment(raw_segment, nested=True)
        if not segment_result.ok:
            merge_issues(issues.setdefault("segments", {}), str(i), segment_result.issues)

        raw_tasks = raw_segment.get("tasks") if isinstance(raw_segment, Mapping) else None
        if raw_tasks is None:
            raw_tasks = []
        if not isinstance(raw_tasks, list):
            add_issue(issues, ["segments", i, "tasks"], "Expected a list of tasks")
            raw_tasks = []

        tasks: List[TaskDraft] = []
        for j, raw_task in enumerate(raw_tasks):
            if isinstance(raw_task, str):
                raw_task = {"title": raw_task}
            task_result = validate_task(raw_task, nested=True)
            if task_result.ok:
                tasks.append(task_result.value)
            else:
                segment_issues = issues.setdefault("segments", {}).setdefault(str(i), {})
                merge_issues(segment_issues.setdefault("tasks", {}), str(j), task_result.issues)

        if segment_result.ok:
            bundles.append(SegmentBundle(segment=segment_result.value, tasks=tasks))

    if issues:
        return Err(issues)
    return Ok(PlanBundle(plan=plan_result.value, segments=bundles))


class PlanService:
    """Operations on learning plans and everything they own."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_plan(self, caller: Caller, payload: Any) -> UUID:
        """Create a plan with all its segments and tasks, or nothing at all."""
        result = validate_bundle(payload, caller.user_id)
        if not result.ok:
            raise ValidationFailed(result.issues)
        bundle: PlanBundle = result.value

        if await self.db.get(User, caller.user_id) is None:
            raise ReferentialIntegrityFailure("Owner does not exist")

        try:
            plan = LearningPlan(**plan_values(bundle.plan))
            self.db.add(plan)
            await self.db.flush()

            for position, item in enumerate(bundle.segments):
                await self._insert_segment(plan.id, position, item)

            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.exception("Rolled back learning plan creation for %s", caller.user_id)
            raise ReferentialIntegrityFailure("Learning plan could not be created") from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("Rolled back learning plan creation for %s", caller.user_id)
            raise InternalError("Failed to create learning plan") from exc

        logger.info(
            "Created learning plan %s for %s with %d segments and %d tasks",
            plan.id,
            caller.user_id,
            len(bundle.segments),
            bundle.task_count,
        )
        return plan.id

    async def _insert_segment(
        self, plan_id: UUID, position: int, item: SegmentBundle
    ) -> Segment:
        segment = Segment(
            learning_plan_id=plan_id, position=position, **item.segment.model_dump()
        )
        self.db.add(segment)
        await self.db.flush()

        for task_position, task in enumerate(item.tasks):
            self.db.add(
                Task(segment_id=segment.id, position=task_position, **task.model_dump())
            )
        await self.db.flush()
        return segment

    async def load_plan(self, plan_id: UUID) -> Optional[LearningPlan]:
        """Load a plan with its segments and their tasks."""
        result = await self.db.execute(
            select(LearningPlan)
            .where(LearningPlan.id == plan_id)
            .options(selectinload(LearningPlan.segments).selectinload(Segment.tasks))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_plan(self, caller: Optional[Caller], plan_id: UUID) -> LearningPlan:
        plan = await self.load_plan(plan_id)
        if plan is None:
            raise NotFound("Learning plan not found")
        ensure_readable(caller, plan)
        return plan

    async def update_plan(
        self, caller: Optional[Caller], plan_id: UUID, payload: Any
    ) -> LearningPlan:
        """Replace a plan's own fields; owner and segments are left untouched."""
        plan = await self.db.get(LearningPlan, plan_id)
        if plan is None:
            raise NotFound("Learning plan not found")
        ensure_writable(caller, plan)

        result = validate_plan(_without_segments(payload, plan.owner_id))
        if not result.ok:
            raise ValidationFailed(result.issues)

        for key, value in plan_values(result.value).items():
            setattr(plan, key, value)
        await self.db.commit()

        return await self.load_plan(plan_id)

    async def delete_plan(self, caller: Optional[Caller], plan_id: UUID) -> CascadeResult:
        """Delete a plan owned by ``caller`` along with its segments and tasks."""
        plan = await self.db.get(LearningPlan, plan_id)
        if plan is None:
            raise NotFound("Learning plan not found")
        ensure_writable(caller, plan)

        try:
            result = await delete_plans(self.db, [plan_id])
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("Failed to delete learning plan %s", plan_id)
            raise InternalError("Failed to delete learning plan") from exc

        logger.info(
            "Deleted learning plan %s with %d segments and %d tasks",
            plan_id,
            result.segments,
            result.tasks,
        )
        return result

    async def delete_plans_for_owner(self, owner_id: UUID) -> CascadeResult:
        """Cascade-delete every plan owned by ``owner_id``; does not commit."""
        plan_ids = (
            await self.db.execute(
                select(LearningPlan.id).where(LearningPlan.owner_id == owner_id)
            )
        ).scalars().all()
        return await delete_plans(self.db, plan_ids)
