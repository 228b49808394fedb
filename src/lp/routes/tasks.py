"""Task endpoints."""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lp.auth import Caller, get_current_session, get_current_user
from lp.db.base import get_db
from lp.schemas.common import DeleteResult
from lp.schemas.tasks import Task
from lp.services.tasks import TaskService

router = APIRouter()


@router.post("", response_model=Task, status_code=201)
async def create_task(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> Task:
    service = TaskService(db)
    task = await service.create_task(caller, payload)
    return Task.model_validate(task)


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_session),
) -> Task:
    service = TaskService(db)
    task = await service.get_task(caller, task_id)
    return Task.model_validate(task)


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: UUID,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> Task:
    service = TaskService(db)
    task = await service.update_task(caller, task_id, payload)
    return Task.model_validate(task)


@router.delete("/{task_id}", response_model=DeleteResult)
async def delete_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> DeleteResult:
    service = TaskService(db)
    await service.delete_task(caller, task_id)
    return DeleteResult()
