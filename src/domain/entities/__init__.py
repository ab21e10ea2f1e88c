"""
Domain Entities

Each entity in its own file.
"""

from .enums import DeviceType, Gender
from .user import User
from .session_log import SessionLog

__all__ = [
    # Enums
    "DeviceType",
    "Gender",
    # Entities
    "User",
    "SessionLog",
]
