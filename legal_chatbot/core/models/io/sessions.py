"""
Chat session I/O models.

Read models mirror the ``chat_sessions`` / ``chat_messages`` rows; request
models keep the camelCase field names the web client sends.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    session_id: uuid.UUID
    role: str
    content: str
    sources: Optional[List[Dict[str, Any]]] = None
    created_at: datetime


class ChatSessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    created_at: datetime
    updated_at: datetime


class ChatSessionDetail(ChatSessionRead):
    """A session with its messages, oldest first."""

    chat_messages: List[ChatMessageRead] = Field(default_factory=list)


class ChatSessionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")


class ChatSessionTitleUpdate(BaseModel):
    """Body of the rename request; the title is type-checked by the endpoint."""

    title: Optional[Any] = None


class ChatMessageCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    role: Optional[str] = None
    content: Optional[str] = None
    sources: Optional[List[Dict[str, Any]]] = None
    user_id: Optional[str] = Field(default=None, alias="userId")


class SuccessResponse(BaseModel):
    success: bool = True


class ChatSessionResponse(SuccessResponse):
    session: ChatSessionDetail


class ChatSessionSummaryResponse(SuccessResponse):
    session: ChatSessionRead


class ChatSessionListResponse(SuccessResponse):
    sessions: List[ChatSessionRead]


class ChatMessageResponse(SuccessResponse):
    message: ChatMessageRead


class ChatMessageListResponse(SuccessResponse):
    messages: List[ChatMessageRead]
