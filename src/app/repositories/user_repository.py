from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import User


class UserAlreadyExists(Exception):
    """Email or user name taken by a concurrent insert"""


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_identifier(self, identifier: str) -> Optional[User]:
        """Get user whose email or user name matches the identifier"""
        pass

    @abstractmethod
    async def exists(self, email: str, user_name: str) -> bool:
        """True if a user already holds the email or the user name"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user

        Raises:
            UserAlreadyExists: unique email or user name violated
        """
        pass
