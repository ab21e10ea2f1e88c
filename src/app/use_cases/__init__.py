"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, logout, token refresh
- sessions/: Session management and retention
- users/: Profile
"""

from .auth import (
    RegisterUseCase,
    RegisterCommand,
    RegisterResponse,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
)
from .sessions import (
    SessionQueryUseCase,
    SessionCleanupUseCase,
)
from .users import LoadProfileUseCase

__all__ = [
    # Auth
    "RegisterUseCase",
    "RegisterCommand",
    "RegisterResponse",
    "LoginUseCase",
    "LogoutUseCase",
    "RefreshTokenUseCase",
    # Sessions
    "SessionQueryUseCase",
    "SessionCleanupUseCase",
    # Users
    "LoadProfileUseCase",
]
