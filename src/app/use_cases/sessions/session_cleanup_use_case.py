"""
Session Cleanup Use Case

Retention job: close expired sessions, then delete long-closed ones.
"""

import logging

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import CleanupReport

logger = logging.getLogger(__name__)


class SessionCleanupUseCase:
    """
    Business Rules:
    - Expired sessions are closed with logout_time stamped (same as a logout)
    - Closed sessions older than the retention window are deleted for good
    - Both steps filter by predicate, so a concurrent login is never affected
    - Running twice in a row changes nothing the second time
    """

    def __init__(self, uow: UnitOfWork, retention_days: int = 30):
        self.uow = uow
        self.retention_days = retention_days

    async def execute(self) -> Result[CleanupReport]:
        async with self.uow:
            expired = await self.uow.sessions.sweep_expired()
            purged = await self.uow.sessions.purge_stale(self.retention_days)
            await self.uow.commit()

        if expired or purged:
            logger.info(
                "Session cleanup completed expired_sessions=%s purged_sessions=%s",
                expired,
                purged,
            )

        return Return.ok(CleanupReport(expired_sessions=expired, purged_sessions=purged))
