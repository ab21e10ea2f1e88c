import pytest

from src.app.use_cases.sessions import SessionCleanupUseCase


@pytest.mark.asyncio
async def test_cleanup_sweeps_then_purges(mock_uow):
    mock_uow.sessions.sweep_expired.return_value = 3
    mock_uow.sessions.purge_stale.return_value = 7

    result = await SessionCleanupUseCase(mock_uow, retention_days=30).execute()

    assert result.is_ok()
    assert result.value.expired_sessions == 3
    assert result.value.purged_sessions == 7
    mock_uow.sessions.sweep_expired.assert_called_once()
    mock_uow.sessions.purge_stale.assert_called_once_with(30)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_cleanup_with_nothing_to_do(mock_uow):
    result = await SessionCleanupUseCase(mock_uow).execute()

    assert result.is_ok()
    assert result.value.expired_sessions == 0
    assert result.value.purged_sessions == 0
