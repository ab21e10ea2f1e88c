"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .register_dto import RegisterCommand, RegisterResponse
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .dtos import (
    CurrentUser,
    LoginResponse,
    LogoutResponse,
    RefreshTokenResponse,
    UserProfile,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "RefreshTokenUseCase",
    # DTOs - Commands
    "RegisterCommand",
    # DTOs - Responses
    "RegisterResponse",
    "LoginResponse",
    "LogoutResponse",
    "RefreshTokenResponse",
    # DTOs - Nested Models
    "UserProfile",
    "CurrentUser",
]
