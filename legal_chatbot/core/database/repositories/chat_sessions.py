"""
Chat session repository.

This module provides data access operations for chat sessions and their
messages. Every session lookup is scoped to its owner so one user can never
read or modify another user's conversation.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.chat_sessions import ChatMessage, ChatSession
from .base import AsyncBaseRepository, QueryBuilder

MAX_TITLE_LENGTH = 200


class ChatSessionRepository(AsyncBaseRepository[ChatSession]):
    """Repository for chat session data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChatSession)

    async def get_for_user(self, session_id: uuid.UUID, user_id: uuid.UUID) -> Optional[ChatSession]:
        """Get a chat session owned by ``user_id``.

        Args:
            session_id: Session ID
            user_id: Owner ID

        Returns:
            ChatSession instance or None when missing or owned by someone else
        """
        stmt = select(ChatSession).where(ChatSession.id == session_id, ChatSession.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def list_for_user(
        self, user_id: uuid.UUID, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[ChatSession]:
        """List a user's sessions, most recently updated first."""
        stmt = (
            select(ChatSession)
            .where(ChatSession.user_id == user_id)
            .order_by(ChatSession.updated_at.desc())  # type: ignore[attr-defined]
        )
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def rename(self, session_id: uuid.UUID, user_id: uuid.UUID, title: str) -> Optional[ChatSession]:
        """Set a new title (truncated to 200 characters) and bump ``updated_at``.

        Returns:
            The updated session, or None when the user owns no such session
        """
        chat_session = await self.get_for_user(session_id, user_id)
        if chat_session is None:
            return None
        chat_session.title = title[:MAX_TITLE_LENGTH]
        chat_session.updated_at = utc_now()
        return await self.update(chat_session)

    async def delete_for_user(self, session_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Delete a user's session together with its messages.

        Messages are removed explicitly as well, so backends without enforced
        foreign keys end up in the same state as the cascading Postgres schema.

        Returns:
            True if a session was deleted, False if none matched
        """
        chat_session = await self.get_for_user(session_id, user_id)
        if chat_session is None:
            return False
        await self.session.execute(sa_delete(ChatMessage).where(ChatMessage.session_id == session_id))
        await self.session.delete(chat_session)
        await self.session.commit()
        return True

    async def add_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to its session and bump the session's ``updated_at``."""
        chat_session = await self.get_by_id(message.session_id)
        if chat_session is not None:
            chat_session.updated_at = utc_now()
            self.session.add(chat_session)
        self.session.add(message)
        await self.session.commit()
        await self.session.refresh(message)
        return message

    async def list_messages(self, session_id: uuid.UUID) -> List[ChatMessage]:
        """Get all messages of a session in chronological order."""
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.created_at.asc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
