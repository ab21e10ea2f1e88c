from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import (
    DeviceInfo,
    ISessionRepository,
    SessionStats,
)
from src.domain.base import utc_now
from src.domain.entities import DeviceType, SessionLog


def _live(now: datetime):
    return and_(SessionLog.is_active == True, SessionLog.expires_at > now)  # noqa: E712


class SessionRepository(ISessionRepository):
    """Session ledger implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def open(self, user_id: UUID, device: DeviceInfo, ttl: timedelta) -> SessionLog:
        now = utc_now()
        session_obj = SessionLog(
            user_id=user_id,
            ip_address=device.ip_address,
            user_agent=(device.user_agent or "Unknown")[:512],
            device_type=device.device_type,
            browser=device.browser,
            os=device.os,
            is_active=True,
            login_time=now,
            last_activity=now,
            expires_at=now + ttl,
            created_at=now,
            updated_at=now,
        )
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def get_by_session_id(self, session_id: str) -> Optional[SessionLog]:
        stmt = select(SessionLog).where(SessionLog.session_id == session_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_live(self, session_id: str) -> Optional[SessionLog]:
        """Expiry is enforced here even if the sweep has not run yet"""
        stmt = select(SessionLog).where(
            SessionLog.session_id == session_id, _live(utc_now())
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def touch(self, session_id: str) -> bool:
        now = utc_now()
        stmt = (
            update(SessionLog)
            .where(SessionLog.session_id == session_id, _live(now))
            .values(last_activity=now, updated_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def renew(self, session_id: str, user_id: UUID, expires_at: datetime) -> bool:
        now = utc_now()
        stmt = (
            update(SessionLog)
            .where(
                SessionLog.session_id == session_id,
                SessionLog.user_id == user_id,
                _live(now),
            )
            .values(last_activity=now, expires_at=expires_at, updated_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def close(self, session_id: str) -> bool:
        # Filtering on is_active keeps the first logout_time; later calls match nothing.
        now = utc_now()
        stmt = (
            update(SessionLog)
            .where(SessionLog.session_id == session_id, SessionLog.is_active == True)  # noqa: E712
            .values(is_active=False, logout_time=now, last_activity=now, updated_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def close_all_for_user(self, user_id: UUID) -> int:
        now = utc_now()
        stmt = (
            update(SessionLog)
            .where(SessionLog.user_id == user_id, SessionLog.is_active == True)  # noqa: E712
            .values(is_active=False, logout_time=now, last_activity=now, updated_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def list_for_user(
        self, user_id: UUID, live_only: bool = False, offset: int = 0, limit: int = 10
    ) -> List[SessionLog]:
        stmt = select(SessionLog).where(SessionLog.user_id == user_id)
        if live_only:
            stmt = stmt.where(_live(utc_now()))
        stmt = stmt.order_by(SessionLog.login_time.desc()).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_for_user(self, user_id: UUID, live_only: bool = False) -> int:
        stmt = select(func.count()).select_from(SessionLog).where(
            SessionLog.user_id == user_id
        )
        if live_only:
            stmt = stmt.where(_live(utc_now()))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def list_live_for_user(self, user_id: UUID) -> List[SessionLog]:
        stmt = (
            select(SessionLog)
            .where(SessionLog.user_id == user_id, _live(utc_now()))
            .order_by(SessionLog.login_time.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def stats_for_user(self, user_id: UUID) -> SessionStats:
        now = utc_now()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

        total = await self.count_for_user(user_id)
        active = await self.count_for_user(user_id, live_only=True)

        today_stmt = select(func.count()).select_from(SessionLog).where(
            SessionLog.user_id == user_id, SessionLog.login_time >= start_of_day
        )
        today = (await self.session.execute(today_stmt)).scalar_one()

        device_stmt = (
            select(SessionLog.device_type, func.count())
            .where(SessionLog.user_id == user_id)
            .group_by(SessionLog.device_type)
        )
        rows = (await self.session.execute(device_stmt)).all()
        breakdown = {
            (device.value if isinstance(device, DeviceType) else str(device)): count
            for device, count in rows
        }

        return SessionStats(
            total_sessions=total,
            active_sessions=active,
            today_sessions=today,
            device_breakdown=breakdown,
        )

    async def sweep_expired(self) -> int:
        now = utc_now()
        stmt = (
            update(SessionLog)
            .where(SessionLog.is_active == True, SessionLog.expires_at <= now)  # noqa: E712
            .values(is_active=False, logout_time=now, last_activity=now, updated_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def purge_stale(self, max_age_days: int = 30) -> int:
        cutoff = utc_now() - timedelta(days=max_age_days)
        stmt = delete(SessionLog).where(
            SessionLog.is_active == False,  # noqa: E712
            SessionLog.logout_time.is_not(None),
            SessionLog.logout_time < cutoff,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
