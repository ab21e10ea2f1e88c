"""
Load Profile Use Case

Loads the authenticated user's public profile.
"""

from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile


class LoadProfileUseCase:
    """
    Use case for loading the current user's profile.

    Business Rules:
    - User id comes from the verified access token
    - User may have been deleted since the token was issued
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserProfile]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            return Return.ok(UserProfile.from_entity(user))
