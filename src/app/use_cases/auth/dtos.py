"""
Authentication Use Case DTOs (Data Transfer Objects)

All Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from src.domain.entities import User


# ============================================================================
# Shared DTOs
# ============================================================================


class UserProfile(BaseModel):
    """Public view of a user - never carries the password hash"""

    id: str
    first_name: str
    last_name: str
    user_name: str
    email: str
    gender: str
    dob: date

    @classmethod
    def from_entity(cls, user: User) -> "UserProfile":
        return cls(
            id=str(user.id),
            first_name=user.first_name,
            last_name=user.last_name,
            user_name=user.user_name,
            email=user.email,
            gender=getattr(user.gender, "value", user.gender),
            dob=user.dob,
        )


class CurrentUser(BaseModel):
    """Identity resolved from a bearer token, attached to the request"""

    id: str
    user_name: str
    email: str


# ============================================================================
# Response DTOs
# ============================================================================


class LoginResponse(BaseModel):
    """Response for user login use case"""

    success: bool = True
    message: str = "Login successful"
    access_token: str
    refresh_token: str
    session_id: str
    user: UserProfile


class LogoutResponse(BaseModel):
    """Response for logout use case"""

    success: bool = True
    message: str = "Logout successful"
    closed_sessions: int = 0


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    success: bool = True
    message: str = "Token refreshed successfully"
    access_token: str
    refresh_token: str
    session_id: Optional[str] = None
