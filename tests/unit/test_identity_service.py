import httpx
import pytest
from sqlalchemy import func, select

from lp.auth import caller_from_claims, decode_session_token
from lp.errors import AuthenticationRequired, InternalError
from lp.models import User, UserRole
from lp.services.identity import IdentityService


def provider_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://mock-identity:8080/userinfo")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("provider error", request=request, response=response)


@pytest.mark.asyncio
async def test_first_sign_in_creates_user(db_session, mock_identity_client):
    service = IdentityService(db_session)
    user, token = await service.sign_in("provider-token")

    mock_identity_client.get_userinfo.assert_awaited_once_with("provider-token")
    assert user.email == "ada@example.com"
    assert user.name == "Ada Lovelace"
    assert user.image == "https://example.com/ada.png"
    assert user.role is UserRole.user

    caller = caller_from_claims(decode_session_token(token))
    assert caller.user_id == user.id
    assert caller.email == "ada@example.com"


@pytest.mark.asyncio
async def test_repeat_sign_in_reuses_user(db_session, mock_identity_client):
    service = IdentityService(db_session)
    first, _ = await service.sign_in("provider-token")
    second, _ = await service.sign_in("provider-token")

    assert first.id == second.id
    total = await db_session.execute(select(func.count()).select_from(User))
    assert total.scalar_one() == 1


@pytest.mark.asyncio
async def test_name_defaults_to_email_prefix(db_session, mock_identity_client):
    mock_identity_client.get_userinfo.return_value = {"email": "grace@example.com"}
    user, _ = await IdentityService(db_session).sign_in("provider-token")
    assert user.name == "grace"
    assert user.image is None


@pytest.mark.asyncio
async def test_rejected_provider_token(db_session, mock_identity_client):
    mock_identity_client.get_userinfo.side_effect = provider_error(401)
    with pytest.raises(AuthenticationRequired):
        await IdentityService(db_session).sign_in("expired-token")


@pytest.mark.asyncio
async def test_provider_outage(db_session, mock_identity_client):
    mock_identity_client.get_userinfo.side_effect = provider_error(503)
    with pytest.raises(InternalError):
        await IdentityService(db_session).sign_in("provider-token")

    mock_identity_client.get_userinfo.side_effect = httpx.ConnectError("refused")
    with pytest.raises(InternalError):
        await IdentityService(db_session).sign_in("provider-token")


@pytest.mark.asyncio
async def test_userinfo_without_email(db_session, mock_identity_client):
    mock_identity_client.get_userinfo.return_value = {"name": "Nobody"}
    with pytest.raises(AuthenticationRequired):
        await IdentityService(db_session).sign_in("provider-token")
