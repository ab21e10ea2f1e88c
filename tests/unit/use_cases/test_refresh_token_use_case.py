from datetime import timedelta
from uuid import uuid4

import pytest

from src.api.utils.jwt import REFRESH, TokenIssuer
from src.app.use_cases.auth.refresh_token_use_case import RefreshTokenUseCase
from src.domain.entities import User


@pytest.mark.asyncio
async def test_refresh_issues_new_pair(mock_uow, token_issuer):
    user_id = uuid4()
    mock_uow.users.get_by_id.return_value = User(id=user_id, user_name="jane")
    old = token_issuer.issue(user_id)

    result = await RefreshTokenUseCase(mock_uow, token_issuer).execute(old.refresh_token)

    assert result.is_ok()
    data = result.value
    assert data.refresh_token != old.refresh_token
    assert token_issuer.verify(data.access_token) == user_id
    assert token_issuer.verify(data.refresh_token, token_type=REFRESH) == user_id
    assert data.session_id is None
    mock_uow.sessions.renew.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_renews_named_session(mock_uow, token_issuer):
    user_id = uuid4()
    mock_uow.users.get_by_id.return_value = User(id=user_id, user_name="jane")
    old = token_issuer.issue(user_id)

    result = await RefreshTokenUseCase(mock_uow, token_issuer).execute(
        old.refresh_token, session_id="sess_abc"
    )

    assert result.is_ok()
    assert result.value.session_id == "sess_abc"
    args = mock_uow.sessions.renew.call_args.args
    assert args[0] == "sess_abc"
    assert args[1] == user_id
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_refresh_with_expired_token(mock_uow, token_issuer):
    expired_issuer = TokenIssuer(
        token_issuer.secret, timedelta(minutes=5), timedelta(seconds=-10)
    )
    expired = expired_issuer.issue(uuid4())

    result = await RefreshTokenUseCase(mock_uow, token_issuer).execute(
        expired.refresh_token
    )

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    assert result.error.message == "Invalid refresh token"
    mock_uow.users.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_with_access_token_is_rejected(mock_uow, token_issuer):
    pair = token_issuer.issue(uuid4())

    result = await RefreshTokenUseCase(mock_uow, token_issuer).execute(pair.access_token)

    assert result.is_err()
    assert result.error.message == "Invalid refresh token"


@pytest.mark.asyncio
async def test_refresh_for_deleted_user(mock_uow, token_issuer):
    mock_uow.users.get_by_id.return_value = None
    pair = token_issuer.issue(uuid4())

    result = await RefreshTokenUseCase(mock_uow, token_issuer).execute(pair.refresh_token)

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
