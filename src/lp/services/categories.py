"""Category catalog service."""

from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lp.errors import ReferentialIntegrityFailure
from lp.models import Category
from lp.schemas.categories import CategoryCreate


class CategoryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self) -> List[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def create_category(self, data: CategoryCreate) -> Category:
        existing = await self.db.execute(
            select(Category).where(Category.name == data.name)
        )
        if existing.scalar_one_or_none() is not None:
            raise ReferentialIntegrityFailure("Category already exists")

        category = Category(**data.model_dump())
        self.db.add(category)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ReferentialIntegrityFailure("Category already exists") from exc
        await self.db.refresh(category)
        return category
