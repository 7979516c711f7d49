"""
API endpoints for chat messages.

The web client stores each user question and assistant answer here right
after the chat endpoint responds.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request

from legal_chatbot.core.database.entities.chat_sessions import ChatMessage, MessageRole
from legal_chatbot.core.database.repositories.chat_sessions import ChatSessionRepository
from legal_chatbot.core.logging_config import get_logger
from legal_chatbot.core.models.io.sessions import (
    ChatMessageCreate,
    ChatMessageListResponse,
    ChatMessageRead,
    ChatMessageResponse,
)
from legal_chatbot.server.errors import ApiError
from legal_chatbot.server.services.auth import parse_uuid, require_user
from legal_chatbot.server.services.deps import AuthClientDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["chat-messages"])

ROLES = {role.value for role in MessageRole}


@router.get(
    "/messages-simple",
    response_model=ChatMessageListResponse,
    summary="List Session Messages",
    description="Retrieve the messages of one of the caller's sessions, oldest first.",
    responses={
        400: {"description": "sessionId is missing"},
        401: {"description": "Caller is not authenticated"},
        404: {"description": "Chat session not found"},
    },
)
async def list_messages(
    request: Request,
    session: SessionDep,
    auth_client: AuthClientDep,
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    user_id_param: Optional[str] = Query(default=None, alias="userId"),
) -> ChatMessageListResponse:
    if not session_id:
        raise ApiError(400, "Session ID is required")
    user_id = await require_user(request, session, auth_client, user_id_param)

    repo = ChatSessionRepository(session)
    parsed_id = parse_uuid(session_id)
    if parsed_id is None or await repo.get_for_user(parsed_id, user_id) is None:
        raise ApiError(404, "Session not found")

    messages = await repo.list_messages(parsed_id)
    return ChatMessageListResponse(messages=[ChatMessageRead.model_validate(m) for m in messages])


@router.post(
    "/messages-simple",
    response_model=ChatMessageResponse,
    summary="Save Message",
    description="Append a user or assistant message to one of the caller's sessions.",
    responses={
        400: {"description": "Required fields are missing or the role is invalid"},
        401: {"description": "Caller is not authenticated"},
        404: {"description": "Chat session not found"},
    },
)
async def create_message(
    body: ChatMessageCreate,
    request: Request,
    session: SessionDep,
    auth_client: AuthClientDep,
) -> ChatMessageResponse:
    """
    Save a chat message.

    - **sessionId**: Target session.
    - **role**: ``user`` or ``assistant``.
    - **content**: Message text.
    - **sources**: Optional sources attached to an assistant answer.
    """
    if not body.session_id or not body.role or not body.content:
        raise ApiError(400, "Missing required fields")
    if body.role not in ROLES:
        raise ApiError(400, f"Invalid role: {body.role}")
    user_id = await require_user(request, session, auth_client, body.user_id)

    repo = ChatSessionRepository(session)
    parsed_id = parse_uuid(body.session_id)
    if parsed_id is None or await repo.get_for_user(parsed_id, user_id) is None:
        raise ApiError(404, "Session not found")

    message = await repo.add_message(
        ChatMessage(session_id=parsed_id, role=body.role, content=body.content, sources=body.sources)
    )
    logger.debug(f"Saved {body.role} message {message.id} in session {parsed_id}")
    return ChatMessageResponse(message=ChatMessageRead.model_validate(message))
