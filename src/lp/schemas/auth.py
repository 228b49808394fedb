"""Sign-in schemas."""

from pydantic import Field

from lp.schemas.common import CamelModel
from lp.schemas.users import User


class SignInRequest(CamelModel):
    """Access token issued by the identity provider."""

    access_token: str = Field(min_length=1)


class SessionToken(CamelModel):
    token: str
    expires_in: int
    user: User
