"""User account endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lp.auth import Caller, get_current_user
from lp.db.base import get_db
from lp.schemas.common import Message
from lp.schemas.users import User, UserProfile, UserProfileList, UserUpdate
from lp.services.users import UserService

router = APIRouter()


@router.get("", response_model=UserProfileList)
async def list_users(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> UserProfileList:
    service = UserService(db)
    users = await service.list_users()
    return UserProfileList(items=[UserProfile.model_validate(u) for u in users])


@router.get("/me", response_model=User)
async def get_me(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> User:
    service = UserService(db)
    return User.model_validate(await service.get_user(caller.user_id))


@router.patch("/me", response_model=User)
async def update_me(
    update: UserUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> User:
    """Update the caller's name or avatar."""
    service = UserService(db)
    return User.model_validate(await service.update_user(caller.user_id, update))


@router.delete("/me", response_model=Message)
async def delete_me(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> Message:
    """Delete the caller's account and all of its learning plans."""
    service = UserService(db)
    await service.delete_user(caller.user_id)
    return Message(message="Account and related data deleted.")


@router.get("/{user_id}", response_model=UserProfile)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
) -> UserProfile:
    service = UserService(db)
    return UserProfile.model_validate(await service.get_user(user_id))
