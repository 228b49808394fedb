"""Segment endpoints."""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lp.auth import Caller, get_current_session, get_current_user
from lp.db.base import get_db
from lp.schemas.common import DeleteResult
from lp.schemas.segments import SegmentDetail
from lp.services.segments import SegmentService

router = APIRouter()


@router.post("", response_model=SegmentDetail, status_code=201)
async def create_segment(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> SegmentDetail:
    """Append a segment to a plan owned by the caller."""
    service = SegmentService(db)
    segment = await service.create_segment(caller, payload)
    return SegmentDetail.model_validate(segment)


@router.get("/{segment_id}", response_model=SegmentDetail)
async def get_segment(
    segment_id: UUID,
    db: AsyncSession = Depends(get_db),
    caller: Optional[Caller] = Depends(get_current_session),
) -> SegmentDetail:
    service = SegmentService(db)
    segment = await service.get_segment(caller, segment_id)
    return SegmentDetail.model_validate(segment)


@router.put("/{segment_id}", response_model=SegmentDetail)
async def update_segment(
    segment_id: UUID,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> SegmentDetail:
    service = SegmentService(db)
    segment = await service.update_segment(caller, segment_id, payload)
    return SegmentDetail.model_validate(segment)


@router.delete("/{segment_id}", response_model=DeleteResult)
async def delete_segment(
    segment_id: UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> DeleteResult:
    """Delete a segment and its tasks."""
    service = SegmentService(db)
    await service.delete_segment(caller, segment_id)
    return DeleteResult()
