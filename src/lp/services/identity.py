"""Sign-in through the external identity provider."""

import logging
from typing import Tuple

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lp.auth import issue_session_token
from lp.clients.identity_provider import IdentityProviderClient
from lp.errors import AuthenticationRequired, InternalError
from lp.models import User, UserRole

logger = logging.getLogger(__name__)


class IdentityService:
    """Exchange a provider access token for a local user and session token."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.provider = IdentityProviderClient()

    async def sign_in(self, access_token: str) -> Tuple[User, str]:
        try:
            userinfo = await self.provider.get_userinfo(access_token)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code in (401, 403):
                raise AuthenticationRequired("Identity provider rejected the token")
            logger.error("Identity provider returned %s", exc.response.status_code)
            raise InternalError("Identity provider error") from exc
        except httpx.HTTPError as exc:
            logger.error("Identity provider unreachable: %s", exc)
            raise InternalError("Identity provider unavailable") from exc

        email = userinfo.get("email")
        if not email:
            raise AuthenticationRequired("Identity provider did not return an email")

        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(
                name=userinfo.get("name") or email.split("@")[0],
                email=email,
                image=userinfo.get("picture"),
                role=UserRole.user,
            )
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            logger.info("Created user %s on first sign-in", user.id)

        token = issue_session_token(user.id, user.email, user.role)
        return user, token
