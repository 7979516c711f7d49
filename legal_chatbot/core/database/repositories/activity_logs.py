"""
Audit repositories for ``query_logs`` and ``user_activities``.
"""

from __future__ import annotations

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.activity_logs import QueryLog, UserActivity
from .base import AsyncBaseRepository


class QueryLogRepository(AsyncBaseRepository[QueryLog]):
    """Repository for answered chat queries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, QueryLog)


class UserActivityRepository(AsyncBaseRepository[UserActivity]):
    """Repository for the per-user activity trail."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserActivity)

    async def list_for_user(self, user_id: uuid.UUID, limit: int = 50) -> List[UserActivity]:
        """Most recent activities of a user."""
        stmt = (
            select(UserActivity)
            .where(UserActivity.user_id == user_id)
            .order_by(UserActivity.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
