"""
API endpoints for chat sessions.

A chat session is one conversation of one user. Every lookup is scoped to the
authenticated caller: a session owned by someone else behaves exactly like a
missing one.
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Query, Request, status

from legal_chatbot.core.database.entities.chat_sessions import DEFAULT_SESSION_TITLE, ChatSession
from legal_chatbot.core.database.repositories.chat_sessions import MAX_TITLE_LENGTH, ChatSessionRepository
from legal_chatbot.core.logging_config import get_logger
from legal_chatbot.core.models.io.sessions import (
    ChatMessageRead,
    ChatSessionCreate,
    ChatSessionDetail,
    ChatSessionListResponse,
    ChatSessionRead,
    ChatSessionResponse,
    ChatSessionSummaryResponse,
    ChatSessionTitleUpdate,
    SuccessResponse,
)
from legal_chatbot.server.errors import ApiError
from legal_chatbot.server.services.auth import parse_uuid, require_user
from legal_chatbot.server.services.deps import AuthClientDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["chat-sessions"])

UserIdQuery = Annotated[Optional[str], Query(alias="userId", description="Client-side user id fallback")]


@router.get(
    "/sessions",
    response_model=ChatSessionListResponse,
    summary="List Chat Sessions",
    description="List the caller's chat sessions, most recently updated first.",
    responses={401: {"description": "Caller is not authenticated"}},
)
async def list_chat_sessions(
    request: Request,
    session: SessionDep,
    auth_client: AuthClientDep,
    user_id_param: UserIdQuery = None,
) -> ChatSessionListResponse:
    user_id = await require_user(request, session, auth_client, user_id_param)
    sessions = await ChatSessionRepository(session).list_for_user(user_id)
    return ChatSessionListResponse(sessions=[ChatSessionRead.model_validate(s) for s in sessions])


@router.post(
    "/sessions",
    response_model=ChatSessionSummaryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Chat Session",
    description="Start a new conversation for the caller.",
    responses={
        201: {"description": "Chat session created successfully"},
        401: {"description": "Caller is not authenticated"},
    },
)
async def create_chat_session(
    request: Request,
    session: SessionDep,
    auth_client: AuthClientDep,
    body: Optional[ChatSessionCreate] = None,
) -> ChatSessionSummaryResponse:
    """
    Create a chat session.

    - **title**: Optional title (defaults to "Cuộc trò chuyện mới", truncated to 200 characters).
    - **userId**: Client-side user id fallback.
    """
    body = body or ChatSessionCreate()
    user_id = await require_user(request, session, auth_client, body.user_id)
    title = (body.title or DEFAULT_SESSION_TITLE)[:MAX_TITLE_LENGTH]
    chat_session = await ChatSessionRepository(session).create(ChatSession(user_id=user_id, title=title))
    logger.info(f"Created chat session {chat_session.id} for user {user_id}")
    return ChatSessionSummaryResponse(session=ChatSessionRead.model_validate(chat_session))


@router.get(
    "/sessions-fixed/{session_id}",
    response_model=ChatSessionResponse,
    summary="Get Chat Session",
    description="Retrieve one of the caller's sessions together with its messages in chronological order.",
    responses={
        200: {"description": "Chat session found"},
        401: {"description": "Caller is not authenticated"},
        404: {"description": "Chat session not found"},
    },
)
async def get_chat_session(
    session_id: str,
    request: Request,
    session: SessionDep,
    auth_client: AuthClientDep,
    user_id_param: UserIdQuery = None,
) -> ChatSessionResponse:
    user_id = await require_user(request, session, auth_client, user_id_param)
    repo = ChatSessionRepository(session)

    parsed_id = parse_uuid(session_id)
    chat_session = await repo.get_for_user(parsed_id, user_id) if parsed_id else None
    if chat_session is None:
        logger.info(f"Session not found: {session_id} (user {user_id})")
        raise ApiError(404, "Session not found")

    messages = await repo.list_messages(chat_session.id)
    detail = ChatSessionDetail(
        id=chat_session.id,
        title=chat_session.title,
        created_at=chat_session.created_at,
        updated_at=chat_session.updated_at,
        chat_messages=[ChatMessageRead.model_validate(m) for m in messages],
    )
    return ChatSessionResponse(session=detail)


@router.patch(
    "/sessions-fixed/{session_id}",
    response_model=ChatSessionSummaryResponse,
    summary="Rename Chat Session",
    description="Change the title of one of the caller's sessions (truncated to 200 characters).",
    responses={
        400: {"description": "Title is missing or not a string"},
        401: {"description": "Caller is not authenticated"},
        404: {"description": "Chat session not found"},
    },
)
async def rename_chat_session(
    session_id: str,
    request: Request,
    session: SessionDep,
    auth_client: AuthClientDep,
    body: Optional[ChatSessionTitleUpdate] = None,
    user_id_param: UserIdQuery = None,
) -> ChatSessionSummaryResponse:
    user_id = await require_user(request, session, auth_client, user_id_param)
    title = body.title if body else None
    if not title or not isinstance(title, str):
        raise ApiError(400, "Title is required")

    parsed_id = parse_uuid(session_id)
    updated = await ChatSessionRepository(session).rename(parsed_id, user_id, title) if parsed_id else None
    if updated is None:
        raise ApiError(404, "Session not found")
    return ChatSessionSummaryResponse(session=ChatSessionRead.model_validate(updated))


@router.delete(
    "/sessions-fixed/{session_id}",
    response_model=SuccessResponse,
    summary="Delete Chat Session",
    description=(
        "Delete one of the caller's sessions and all of its messages. Deleting a missing session also succeeds."
    ),
    responses={401: {"description": "Caller is not authenticated"}},
)
async def delete_chat_session(
    session_id: str,
    request: Request,
    session: SessionDep,
    auth_client: AuthClientDep,
    user_id_param: UserIdQuery = None,
) -> SuccessResponse:
    user_id = await require_user(request, session, auth_client, user_id_param)
    parsed_id = parse_uuid(session_id)
    deleted = await ChatSessionRepository(session).delete_for_user(parsed_id, user_id) if parsed_id else False
    logger.info(f"Delete session {session_id} for user {user_id}: deleted={deleted}")
    return SuccessResponse()
