"""
Chat session entity models.

This module contains the database entities for chat session and message
persistence. A session belongs to one user; deleting it removes its messages
through the ``ON DELETE CASCADE`` foreign key.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid
from sqlmodel import Field

from ..base import Base, JSONType, utc_now

DEFAULT_SESSION_TITLE = "Cuộc trò chuyện mới"


class MessageRole(str, Enum):
    """Role of message sender in conversation."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatSession(Base, table=True):
    """Persistent chat session (one conversation of one user).

    Table: chat_sessions
    """

    __tablename__ = "chat_sessions"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True, description="Owner (Supabase auth user id)")
    title: str = Field(default=DEFAULT_SESSION_TITLE, max_length=200, description="Chat session title")

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"ChatSession(id={self.id}, user_id={self.user_id}, title={self.title!r})"


class ChatMessage(Base, table=True):
    """Individual message within a chat session.

    Table: chat_messages
    """

    __tablename__ = "chat_messages"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    session_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("chat_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    )

    role: str = Field(description="user or assistant")
    content: str = Field(sa_type=Text, description="Message content")
    sources: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSONType, nullable=True))

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)

    def __repr__(self) -> str:
        return f"ChatMessage(id={self.id}, role={self.role}, session_id={self.session_id})"
