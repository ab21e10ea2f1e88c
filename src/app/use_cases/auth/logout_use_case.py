"""
Logout Use Case

Closes one session, or every session of the caller when none is named.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Use case for logout.

    Business Rules:
    - With a session id: close that session (idempotent, unknown ids ignored)
    - A session owned by another user is left untouched
    - Without a session id but with an authenticated user: close all their sessions
    - Always succeeds
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: Optional[UUID] = None, session_id: Optional[str] = None
    ) -> Result[LogoutResponse]:
        """
        Execute logout use case.

        Args:
            user_id: Authenticated caller, if any
            session_id: Session to close, if the client still knows it

        Returns:
            Result with LogoutResponse (never an Error)
        """
        async with self.uow:
            closed = 0

            if session_id:
                session = await self.uow.sessions.get_by_session_id(session_id)
                owned = session is not None and (
                    user_id is None or session.user_id == user_id
                )
                if owned and await self.uow.sessions.close(session_id):
                    closed = 1
                    logger.info(
                        "User session logged out session_id=%s user_id=%s",
                        session_id,
                        session.user_id,
                    )
            elif user_id is not None:
                closed = await self.uow.sessions.close_all_for_user(user_id)
                logger.info(
                    "All user sessions logged out user_id=%s count=%s", user_id, closed
                )

            await self.uow.commit()

            return Return.ok(LogoutResponse(closed_sessions=closed))
