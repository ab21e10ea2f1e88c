from typing import Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository, UserAlreadyExists
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_identifier(self, identifier: str) -> Optional[User]:
        """Get user by email (case-folded) or exact user name"""
        identifier = identifier.strip()
        stmt = select(User).where(
            or_(User.email == identifier.lower(), User.user_name == identifier)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def exists(self, email: str, user_name: str) -> bool:
        stmt = select(User.id).where(
            or_(User.email == email.strip().lower(), User.user_name == user_name)
        )
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def create(self, user: User) -> User:
        """Create a new user"""
        user.email = user.email.strip().lower()
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise UserAlreadyExists(user.email) from exc
        await self.session.refresh(user)
        return user
