"""
Login Use Case

Verifies credentials, issues a token pair and opens a session record.
"""

import logging

from src.libs.result import Error, Result, Return
from src.api.utils.jwt import TokenIssuer
from src.app.repositories.session_repository import DeviceInfo
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from .dtos import LoginResponse, UserProfile

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error(
    "INVALID_CREDENTIALS", "Invalid email/username or password"
)


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - Identifier is an email (case-insensitive) or a user name
    - Constant-time password comparison, also for unknown users
    - Unknown user and wrong password produce the same error
    - Exactly one new session record per successful login
    - Session record expires with the refresh token
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, tokens: TokenIssuer):
        self.uow = uow
        self.hasher = hasher
        self.tokens = tokens

    async def execute(
        self, identifier: str, password: str, device: DeviceInfo
    ) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            identifier: Email or user name
            password: Plain text password
            device: Client metadata for the session record

        Returns:
            Result with LoginResponse containing tokens and session id, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_identifier(identifier)

            if user is None:
                await self.hasher.verify_dummy(password)
                return Return.err(INVALID_CREDENTIALS)

            if not await self.hasher.verify(password, user.password_hash):
                return Return.err(INVALID_CREDENTIALS)

            tokens = self.tokens.issue(user.id)

            session = await self.uow.sessions.open(
                user.id, device, self.tokens.refresh_ttl
            )

            await self.uow.commit()

            logger.info(
                "User logged in user_id=%s session_id=%s device=%s browser=%s os=%s ip=%s",
                user.id,
                session.session_id,
                getattr(device.device_type, "value", device.device_type),
                device.browser,
                device.os,
                device.ip_address,
            )

            return Return.ok(
                LoginResponse(
                    access_token=tokens.access_token,
                    refresh_token=tokens.refresh_token,
                    session_id=session.session_id,
                    user=UserProfile.from_entity(user),
                )
            )
