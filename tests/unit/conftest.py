from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.api.utils.jwt import TokenIssuer
from src.app.services.password_hasher import PasswordHasher


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with user and session repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.get_by_identifier = AsyncMock()
    uow.users.exists = AsyncMock(return_value=False)
    uow.users.create = AsyncMock()

    uow.sessions = MagicMock()
    uow.sessions.open = AsyncMock()
    uow.sessions.get_by_session_id = AsyncMock()
    uow.sessions.find_live = AsyncMock()
    uow.sessions.touch = AsyncMock(return_value=True)
    uow.sessions.renew = AsyncMock(return_value=True)
    uow.sessions.close = AsyncMock(return_value=True)
    uow.sessions.close_all_for_user = AsyncMock(return_value=0)
    uow.sessions.sweep_expired = AsyncMock(return_value=0)
    uow.sessions.purge_stale = AsyncMock(return_value=0)
    uow.sessions.list_for_user = AsyncMock(return_value=[])
    uow.sessions.count_for_user = AsyncMock(return_value=0)
    uow.sessions.list_live_for_user = AsyncMock(return_value=[])
    uow.sessions.stats_for_user = AsyncMock()
    return uow


@pytest.fixture
def hasher():
    # Low cost factor keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_issuer():
    return TokenIssuer(
        secret="unit-test-secret",
        access_ttl=timedelta(days=7),
        refresh_ttl=timedelta(days=30),
    )
