"""
Session Log Entity

One row per authenticated login instance.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import generate_session_id, utc_now
from .enums import DeviceType


class SessionLog(SQLModel, table=True):
    """
    SessionLog entity - audit trail of a login, parallel to the issued tokens.

    Business Rules:
    - Live iff is_active and expires_at > now
    - Closing (logout, termination, sweep) is one-way: never reactivated
    - Expiry is evaluated at read time; the sweep converts expired rows to closed
    - Closed rows are purged after the retention window
    """

    __tablename__ = "session_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    session_id: str = Field(
        default_factory=generate_session_id, unique=True, index=True, max_length=64
    )
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    # Device metadata
    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    device_type: DeviceType = Field(default=DeviceType.unknown)
    browser: Optional[str] = Field(default=None, max_length=32)
    os: Optional[str] = Field(default=None, max_length=32)

    is_active: bool = Field(default=True)

    # Timestamps
    login_time: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    logout_time: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_activity: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_session_log_user_active", "user_id", "is_active"),
        Index("idx_session_log_expires_at", "expires_at"),
        Index("idx_session_log_login_time", "login_time"),
    )
