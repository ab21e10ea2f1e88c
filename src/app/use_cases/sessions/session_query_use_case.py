"""
Session Query Use Case

Per-user session management: history, live sessions, statistics,
termination and activity updates.
"""

import logging
import math
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import (
    ActiveSessionsResponse,
    Pagination,
    SessionActionResponse,
    SessionHistoryResponse,
    SessionInfo,
    SessionStatsResponse,
)

logger = logging.getLogger(__name__)


class SessionQueryUseCase:
    """
    Use case for a user managing their own sessions.

    Business Rules:
    - Users only see and act on their own sessions
    - Terminating a closed session is a no-op success
    - Activity can only be recorded on a live session
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def history(
        self, user_id: UUID, page: int = 1, limit: int = 10, active_only: bool = False
    ) -> Result[SessionHistoryResponse]:
        async with self.uow:
            offset = (page - 1) * limit
            sessions = await self.uow.sessions.list_for_user(
                user_id, live_only=active_only, offset=offset, limit=limit
            )
            total = await self.uow.sessions.count_for_user(user_id, live_only=active_only)
            total_pages = math.ceil(total / limit) if limit else 0

            logger.info(
                "User sessions retrieved user_id=%s total=%s page=%s", user_id, total, page
            )

            return Return.ok(
                SessionHistoryResponse(
                    sessions=[SessionInfo.from_entity(s) for s in sessions],
                    pagination=Pagination(
                        current_page=page,
                        total_pages=total_pages,
                        total_sessions=total,
                        has_next_page=page < total_pages,
                        has_prev_page=page > 1,
                    ),
                )
            )

    async def active(self, user_id: UUID) -> Result[ActiveSessionsResponse]:
        async with self.uow:
            sessions = await self.uow.sessions.list_live_for_user(user_id)
            return Return.ok(
                ActiveSessionsResponse(
                    sessions=[SessionInfo.from_entity(s) for s in sessions],
                    count=len(sessions),
                )
            )

    async def stats(self, user_id: UUID) -> Result[SessionStatsResponse]:
        async with self.uow:
            stats = await self.uow.sessions.stats_for_user(user_id)
            return Return.ok(
                SessionStatsResponse(
                    total_sessions=stats.total_sessions,
                    active_sessions=stats.active_sessions,
                    today_sessions=stats.today_sessions,
                    device_breakdown=stats.device_breakdown,
                )
            )

    async def terminate(
        self, session_id: str, user_id: UUID
    ) -> Result[SessionActionResponse]:
        """
        Terminate one session of the caller.

        Returns:
            Result with SessionActionResponse, or
            Error(SESSION_NOT_FOUND) / Error(FORBIDDEN)
        """
        async with self.uow:
            session = await self.uow.sessions.get_by_session_id(session_id)
            if session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

            if session.user_id != user_id:
                return Return.err(
                    Error("FORBIDDEN", "You can only terminate your own sessions")
                )

            await self.uow.sessions.close(session_id)
            await self.uow.commit()

            logger.info("Session terminated session_id=%s user_id=%s", session_id, user_id)

            return Return.ok(
                SessionActionResponse(
                    message="Session terminated successfully", session_id=session_id
                )
            )

    async def terminate_all(self, user_id: UUID) -> Result[SessionActionResponse]:
        async with self.uow:
            count = await self.uow.sessions.close_all_for_user(user_id)
            await self.uow.commit()

            logger.info("All user sessions terminated user_id=%s count=%s", user_id, count)

            return Return.ok(
                SessionActionResponse(
                    message="All sessions terminated successfully",
                    terminated_sessions=count,
                )
            )

    async def update_activity(
        self, session_id: str, user_id: UUID
    ) -> Result[SessionActionResponse]:
        async with self.uow:
            session = await self.uow.sessions.find_live(session_id)
            if session is None or session.user_id != user_id:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

            await self.uow.sessions.touch(session_id)
            await self.uow.commit()

            return Return.ok(
                SessionActionResponse(
                    message="Session activity updated", session_id=session_id
                )
            )
