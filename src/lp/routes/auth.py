"""Sign-in endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lp.config import get_settings
from lp.db.base import get_db
from lp.schemas.auth import SessionToken, SignInRequest
from lp.schemas.users import User
from lp.services.identity import IdentityService

router = APIRouter()


@router.post("/session", response_model=SessionToken)
async def create_session(
    body: SignInRequest,
    db: AsyncSession = Depends(get_db),
) -> SessionToken:
    """Exchange an identity provider access token for a session token."""
    service = IdentityService(db)
    user, token = await service.sign_in(body.access_token)
    return SessionToken(
        token=token,
        expires_in=get_settings().session_ttl_seconds,
        user=User.model_validate(user),
    )
