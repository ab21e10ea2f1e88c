"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class Gender(str, Enum):
    """User gender"""

    male = "male"
    female = "female"
    other = "other"


class DeviceType(str, Enum):
    """Coarse device classification derived from the User-Agent header"""

    desktop = "desktop"
    mobile = "mobile"
    tablet = "tablet"
    unknown = "unknown"
