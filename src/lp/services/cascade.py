"""Cascading deletes for plans and segments.

Every deletion entry point (single plan, single segment, account deletion)
goes through these helpers so children are always removed with their parent.
Nothing here commits; callers own the transaction.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lp.models import LearningPlan, Segment, Task


@dataclass
class CascadeResult:
    """Number of documents removed per level."""

    plans: int = 0
    segments: int = 0
    tasks: int = 0

    def __iadd__(self, other: "CascadeResult") -> "CascadeResult":
        self.plans += other.plans
        self.segments += other.segments
        self.tasks += other.tasks
        return self


async def delete_segments(
    db: AsyncSession, segment_ids: Sequence[UUID]
) -> CascadeResult:
    """Delete the given segments and every task inside them."""
    if not segment_ids:
        return CascadeResult()

    tasks = await db.execute(delete(Task).where(Task.segment_id.in_(segment_ids)))
    segments = await db.execute(delete(Segment).where(Segment.id.in_(segment_ids)))
    return CascadeResult(segments=segments.rowcount, tasks=tasks.rowcount)


async def delete_plans(db: AsyncSession, plan_ids: Iterable[UUID]) -> CascadeResult:
    """Delete plans together with their segments and tasks."""
    result = CascadeResult()
    for plan_id in plan_ids:
        segment_ids = (
            await db.execute(
                select(Segment.id).where(Segment.learning_plan_id == plan_id)
            )
        ).scalars().all()
        result += await delete_segments(db, list(segment_ids))

        deleted = await db.execute(
            delete(LearningPlan).where(LearningPlan.id == plan_id)
        )
        result.plans += deleted.rowcount
    return result
