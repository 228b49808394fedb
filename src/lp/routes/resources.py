"""Resource catalog endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lp.config import get_settings
from lp.db.base import get_resource_db
from lp.schemas.resources import Resource, ResourceList
from lp.services.resources import ResourceService

router = APIRouter()


def _items(results) -> ResourceList:
    items = []
    for resource, score in results:
        item = Resource.model_validate(resource)
        item.score = score
        items.append(item)
    return ResourceList(items=items)


@router.get("", response_model=ResourceList)
async def list_resources(
    q: Optional[str] = Query(default=None, max_length=200),
    content_type: Optional[str] = Query(default=None, alias="contentType"),
    source: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1, le=50),
    db: AsyncSession = Depends(get_resource_db),
) -> ResourceList:
    """Search the resource catalog."""
    service = ResourceService(db)
    results = await service.search(
        query=q, content_type=content_type, source=source, limit=limit
    )
    return _items(results)


@router.get("/picker", response_model=ResourceList)
async def pick_resources(
    q: Optional[str] = Query(default=None, max_length=200),
    content_type: Optional[str] = Query(default=None, alias="contentType"),
    db: AsyncSession = Depends(get_resource_db),
) -> ResourceList:
    """Short result list for attaching a resource to a plan or task."""
    service = ResourceService(db)
    results = await service.search(
        query=q,
        content_type=content_type,
        limit=get_settings().resource_picker_size,
    )
    return _items(results)
