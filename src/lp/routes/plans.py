"""Learning plan endpoints."""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lp.auth import Caller, get_current_session, get_current_user
from lp.db.base import get_db
from lp.models import LearningPlan
from lp.schemas.common import DeleteResult
from lp.schemas.plans import PlanCreated, PlanDetail, PlanList, PlanSummary
from lp.services.plans import PlanService
from lp.services.search import PlanSearchService

router = APIRouter()


def _summary(plan: LearningPlan, score: Optional[float] = None) -> PlanSummary:
    summary = PlanSummary.model_validate(plan)
    summary.score = score
    return summary


@router.get("", response_model=PlanList)
async def list_plans(
    q: Optional[str] = Query(default=None, max_length=200),
    db: AsyncSession = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_session),
) -> PlanList:
    """List plans visible to the caller, ranked by relevance when ``q`` is set."""
    service = PlanSearchService(db)
    results = await service.search(caller, q)
    return PlanList(items=[_summary(plan, score) for plan, score in results])


@router.post("", response_model=PlanCreated, status_code=201)
async def create_plan(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> PlanCreated:
    """Create a plan together with its segments and tasks."""
    service = PlanService(db)
    plan_id = await service.create_plan(caller, payload)
    return PlanCreated(plan_id=plan_id)


@router.get("/{plan_id}", response_model=PlanDetail)
async def get_plan(
    plan_id: UUID,
    db: AsyncSession = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_session),
) -> PlanDetail:
    service = PlanService(db)
    plan = await service.get_plan(caller, plan_id)
    return PlanDetail.model_validate(plan)


@router.put("/{plan_id}", response_model=PlanDetail)
async def update_plan(
    plan_id: UUID,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> PlanDetail:
    service = PlanService(db)
    plan = await service.update_plan(caller, plan_id, payload)
    return PlanDetail.model_validate(plan)


@router.delete("/{plan_id}", response_model=DeleteResult)
async def delete_plan(
    plan_id: UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> DeleteResult:
    """Delete a plan and everything inside it."""
    service = PlanService(db)
    await service.delete_plan(caller, plan_id)
    return DeleteResult()
