"""
Session Use Case DTOs
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from src.domain.entities import SessionLog


class SessionInfo(BaseModel):
    """Public view of a session record"""

    session_id: str
    user_id: str
    login_time: datetime
    logout_time: Optional[datetime] = None
    last_activity: datetime
    expires_at: datetime
    is_active: bool
    device_type: str
    browser: Optional[str] = None
    os: Optional[str] = None
    ip_address: Optional[str] = None

    @classmethod
    def from_entity(cls, session: SessionLog) -> "SessionInfo":
        return cls(
            session_id=session.session_id,
            user_id=str(session.user_id),
            login_time=session.login_time,
            logout_time=session.logout_time,
            last_activity=session.last_activity,
            expires_at=session.expires_at,
            is_active=session.is_active,
            device_type=getattr(session.device_type, "value", session.device_type),
            browser=session.browser,
            os=session.os,
            ip_address=session.ip_address,
        )


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_sessions: int
    has_next_page: bool
    has_prev_page: bool


class SessionHistoryResponse(BaseModel):
    success: bool = True
    sessions: List[SessionInfo]
    pagination: Pagination


class ActiveSessionsResponse(BaseModel):
    success: bool = True
    sessions: List[SessionInfo]
    count: int


class SessionStatsResponse(BaseModel):
    success: bool = True
    total_sessions: int
    active_sessions: int
    today_sessions: int
    device_breakdown: Dict[str, int]


class SessionActionResponse(BaseModel):
    """Response for terminate / activity operations"""

    success: bool = True
    message: str
    session_id: Optional[str] = None
    terminated_sessions: Optional[int] = None


class CleanupReport(BaseModel):
    expired_sessions: int
    purged_sessions: int
