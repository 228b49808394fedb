"""Category endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lp.auth import Caller, get_current_user
from lp.db.base import get_db
from lp.schemas.categories import Category, CategoryCreate, CategoryList
from lp.services.access import require_admin
from lp.services.categories import CategoryService

router = APIRouter()


@router.get("", response_model=CategoryList)
async def list_categories(db: AsyncSession = Depends(get_db)) -> CategoryList:
    service = CategoryService(db)
    categories = await service.list_categories()
    return CategoryList(items=[Category.model_validate(c) for c in categories])


@router.post("", response_model=Category, status_code=201)
async def create_category(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> Category:
    """Add a category (administrators only)."""
    require_admin(caller)
    service = CategoryService(db)
    return Category.model_validate(await service.create_category(data))
