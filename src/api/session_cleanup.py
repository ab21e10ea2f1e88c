import asyncio
import logging

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.sessions import CleanupReport, SessionCleanupUseCase

logger = logging.getLogger(__name__)


async def run_session_cleanup(session_factory, retention_days: int) -> CleanupReport:
    async with session_factory() as session:
        use_case = SessionCleanupUseCase(SqlAlchemyUnitOfWork(session), retention_days)
        result = await use_case.execute()
    return result.value


async def periodic_session_cleanup(session_factory, retention_days: int, interval: int):
    """Runs until cancelled. A failed run is logged and retried on the next tick."""
    while True:
        await asyncio.sleep(interval)
        try:
            await run_session_cleanup(session_factory, retention_days)
        except Exception:
            logger.exception("Error running session cleanup")
