"""
Refresh Token Use Case

Exchanges a valid refresh token for a brand-new token pair.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.api.utils.jwt import REFRESH, InvalidToken, TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)

INVALID_REFRESH_TOKEN = Error("INVALID_TOKEN", "Invalid refresh token")


class RefreshTokenUseCase:
    """
    Use case for refreshing tokens.

    Business Rules:
    - Refresh token must verify (signature, expiry, type)
    - User must still exist
    - New pair is bound to the same user id
    - If the client names its session and it is live and owned by the user,
      the session's last_activity and expires_at move forward
    """

    def __init__(self, uow: UnitOfWork, tokens: TokenIssuer):
        self.uow = uow
        self.tokens = tokens

    async def execute(
        self, refresh_token: str, session_id: Optional[str] = None
    ) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to verify
            session_id: Optional session to renew alongside the tokens

        Returns:
            Result with RefreshTokenResponse containing new tokens, or Error
        """
        try:
            user_id = self.tokens.verify(refresh_token, token_type=REFRESH)
        except InvalidToken as exc:
            logger.warning("Token refresh rejected: %s", exc)
            return Return.err(INVALID_REFRESH_TOKEN)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(INVALID_REFRESH_TOKEN)

            renewed = False
            if session_id:
                renewed = await self.uow.sessions.renew(
                    session_id, user_id, utc_now() + self.tokens.refresh_ttl
                )
                await self.uow.commit()

            tokens = self.tokens.issue(user_id)

            logger.info(
                "Token refreshed user_id=%s session_renewed=%s", user_id, renewed
            )

            return Return.ok(
                RefreshTokenResponse(
                    access_token=tokens.access_token,
                    refresh_token=tokens.refresh_token,
                    session_id=session_id if renewed else None,
                )
            )
