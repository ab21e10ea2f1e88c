from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from uuid import UUID

from src.domain.entities import DeviceType, SessionLog


@dataclass(frozen=True)
class DeviceInfo:
    """Client metadata captured at login"""

    user_agent: str = "Unknown"
    device_type: DeviceType = DeviceType.unknown
    browser: str = "Unknown"
    os: str = "Unknown"
    ip_address: Optional[str] = None


@dataclass
class SessionStats:
    total_sessions: int = 0
    active_sessions: int = 0
    today_sessions: int = 0
    device_breakdown: Dict[str, int] = field(default_factory=dict)


class ISessionRepository(ABC):
    """Session ledger interface - application layer

    Mutations are single predicate-filtered statements so concurrent
    requests never lose updates to the same row.
    """

    @abstractmethod
    async def open(self, user_id: UUID, device: DeviceInfo, ttl: timedelta) -> SessionLog:
        """Insert a live session expiring ttl from now"""
        pass

    @abstractmethod
    async def get_by_session_id(self, session_id: str) -> Optional[SessionLog]:
        """Get session regardless of state"""
        pass

    @abstractmethod
    async def find_live(self, session_id: str) -> Optional[SessionLog]:
        """Get session only if active and not expired"""
        pass

    @abstractmethod
    async def touch(self, session_id: str) -> bool:
        """Set last_activity on a live session. Returns False if nothing matched."""
        pass

    @abstractmethod
    async def renew(self, session_id: str, user_id: UUID, expires_at: datetime) -> bool:
        """Touch a live session owned by user_id and move its expiry"""
        pass

    @abstractmethod
    async def close(self, session_id: str) -> bool:
        """Deactivate a session. Returns True only for the call that closed it."""
        pass

    @abstractmethod
    async def close_all_for_user(self, user_id: UUID) -> int:
        """Deactivate every active session of a user. Returns count."""
        pass

    @abstractmethod
    async def list_for_user(
        self, user_id: UUID, live_only: bool = False, offset: int = 0, limit: int = 10
    ) -> List[SessionLog]:
        """Session history for a user, newest login first"""
        pass

    @abstractmethod
    async def count_for_user(self, user_id: UUID, live_only: bool = False) -> int:
        """Count sessions for a user"""
        pass

    @abstractmethod
    async def list_live_for_user(self, user_id: UUID) -> List[SessionLog]:
        """Live sessions for a user, newest login first"""
        pass

    @abstractmethod
    async def stats_for_user(self, user_id: UUID) -> SessionStats:
        """Aggregate session counters for a user"""
        pass

    @abstractmethod
    async def sweep_expired(self) -> int:
        """Close every active session whose expiry has passed. Returns count."""
        pass

    @abstractmethod
    async def purge_stale(self, max_age_days: int = 30) -> int:
        """Delete closed sessions logged out more than max_age_days ago. Returns count."""
        pass
