"""
User Entity

Identity record owned by the credential store.
"""

from datetime import date, datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now
from .enums import Gender


class User(SQLModel, table=True):
    """
    User entity - identity plus profile.

    Business Rules:
    - user_name and email are unique across all users
    - email is stored lower-cased
    - Password stored as bcrypt hash
    - id never changes once created
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_name: str = Field(unique=True, index=True, max_length=30)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    gender: Gender = Field(default=Gender.other)
    dob: date

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
