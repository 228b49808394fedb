"""User account service."""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lp.errors import InternalError, NotFound
from lp.models import User
from lp.schemas.users import UserUpdate
from lp.services.cascade import CascadeResult
from lp.services.plans import PlanService

logger = logging.getLogger(__name__)


class UserService:
    """Profile reads, updates and self-service account deletion."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.plans = PlanService(db)

    async def get_user(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def list_users(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.name))
        return list(result.scalars().all())

    async def update_user(self, user_id: UUID, update: UserUpdate) -> User:
        user = await self.get_user(user_id)
        for key, value in update.model_dump(exclude_unset=True).items():
            if key == "name" and value is None:
                continue
            setattr(user, key, value)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def delete_user(self, user_id: UUID) -> CascadeResult:
        """Delete the account and every plan it owns, in one transaction."""
        await self.get_user(user_id)
        try:
            result = await self.plans.delete_plans_for_owner(user_id)
            await self.db.execute(delete(User).where(User.id == user_id))
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("Failed to delete account %s", user_id)
            raise InternalError("Failed to delete account") from exc

        logger.info(
            "Deleted account %s with %d plans, %d segments and %d tasks",
            user_id,
            result.plans,
            result.segments,
            result.tasks,
        )
        return result
