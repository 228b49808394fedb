"""Session token handling and caller resolution."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import UUID

import jwt
from fastapi import Request

from lp.config import get_settings
from lp.errors import AuthenticationRequired
from lp.models import UserRole


@dataclass(frozen=True)
class Caller:
    """Identity of the signed-in user making a request."""

    user_id: UUID
    role: UserRole = UserRole.user
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.admin


def _signing_key() -> str:
    return get_settings().jwt_secret or "secret"


def issue_session_token(user_id: UUID, email: str, role: UserRole) -> str:
    """Create a signed session token for a signed-in user."""
    settings = get_settings()
    now = datetime.utcnow()
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role.value,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": now + timedelta(seconds=settings.session_ttl_seconds),
    }
    return jwt.encode(payload, _signing_key(), algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> Dict[str, Any]:
    """Decode and verify a session token; raises ``jwt.InvalidTokenError``."""
    settings = get_settings()
    return jwt.decode(
        token,
        _signing_key(),
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


def caller_from_claims(claims: Dict[str, Any]) -> Caller:
    """Build a caller from token claims; raises ``ValueError`` when malformed."""
    user_id = claims.get("sub")
    if not user_id:
        raise ValueError("missing user ID")
    return Caller(
        user_id=UUID(str(user_id)),
        role=UserRole(claims.get("role") or UserRole.user.value),
        email=claims.get("email"),
    )


async def get_current_session(request: Request) -> Optional[Caller]:
    """Resolve the caller attached by ``AuthMiddleware``, if any."""
    return getattr(request.state, "caller", None)


async def get_current_user(request: Request) -> Caller:
    """Require a signed-in caller."""
    caller = await get_current_session(request)
    if caller is None:
        raise AuthenticationRequired()
    return caller
