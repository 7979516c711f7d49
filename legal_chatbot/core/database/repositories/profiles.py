"""
Profile repository.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.profiles import Profile
from .base import AsyncBaseRepository


class ProfileRepository(AsyncBaseRepository[Profile]):
    """Repository for user profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Profile)

    async def exists(self, user_id: uuid.UUID) -> bool:
        """Return True when a profile row exists for ``user_id``."""
        return await self.get_by_id(user_id) is not None
