"""
User profile entity.

Maps the ``profiles`` table, one row per Supabase auth user.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class UserRole(str, Enum):
    """Application role stored on the profile."""

    USER = "user"
    EDITOR = "editor"
    ADMIN = "admin"


class Profile(Base, table=True):
    """Application profile of an authenticated user.

    Table: profiles
    """

    __tablename__ = "profiles"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(primary_key=True, description="Supabase auth user id")
    full_name: Optional[str] = Field(default=None)
    role: str = Field(default=UserRole.USER.value, description="user, editor or admin")

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Profile(id={self.id}, role={self.role})"
