"""
Audit entities.

``query_logs`` keeps one row per answered chat query; ``user_activities`` is
the generic per-user activity trail (chat queries, uploads, deletions).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field

from ..base import Base, JSONType, utc_now


class QueryLog(Base, table=True):
    """One answered chat query.

    Table: query_logs
    """

    __tablename__ = "query_logs"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: Optional[uuid.UUID] = Field(default=None, index=True)
    query: str = Field(sa_type=Text)
    response: Optional[str] = Field(default=None, sa_type=Text)
    sources_count: int = Field(default=0)
    matched_ids: Optional[List[Any]] = Field(default=None, sa_column=Column(JSONType, nullable=True))

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)

    def __repr__(self) -> str:
        return f"QueryLog(id={self.id}, user_id={self.user_id}, sources_count={self.sources_count})"


class UserActivity(Base, table=True):
    """An audited user action.

    Table: user_activities
    """

    __tablename__ = "user_activities"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)
    activity_type: str = Field(description="query, upload, delete, ...")
    action: str = Field(description="Specific action, e.g. chat_query")
    details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONType, nullable=True))
    ip_address: Optional[str] = Field(default=None)
    user_agent: Optional[str] = Field(default=None, sa_type=Text)
    risk_level: str = Field(default="low")

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)

    def __repr__(self) -> str:
        return f"UserActivity(id={self.id}, action={self.action}, user_id={self.user_id})"
