"""
Chat Endpoint.

``POST /api/chat-enhanced`` answers one user question. The answer comes from
conversation follow-up rules, the n8n workflow, or the local law search (see
``legal_chatbot.assistant.service``).
"""

import json
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from legal_chatbot.core.logging_config import get_logger
from legal_chatbot.core.models.io.chat import ChatRequest, ChatResponse
from legal_chatbot.server.errors import ApiError
from legal_chatbot.server.services.auth import get_client_info, require_user
from legal_chatbot.server.services.deps import AuthClientDep, ChatServiceDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["chat"])

LOGIN_REQUIRED_REPLY = "Vui lòng đăng nhập để sử dụng tính năng chat."
SYSTEM_ERROR_REPLY = "Xin lỗi, hệ thống đang gặp sự cố. Vui lòng thử lại sau."


async def get_chat_user(request: Request, session: SessionDep, auth_client: AuthClientDep) -> uuid.UUID:
    """Authenticate the caller from the raw body, before it is validated as a ``ChatRequest``."""
    try:
        payload = json.loads(await request.body() or b"null")
    except ValueError:
        payload = None
    client_user_id = payload.get("userId") if isinstance(payload, dict) else None
    if not isinstance(client_user_id, str):
        client_user_id = None
    return await require_user(request, session, auth_client, client_user_id, response=LOGIN_REQUIRED_REPLY)


ChatUserDep = Annotated[uuid.UUID, Depends(get_chat_user)]


@router.post(
    "/chat-enhanced",
    response_model=ChatResponse,
    summary="Ask the Legal Assistant",
    description=(
        "Answer a question about Vietnamese law. Follow-up questions are answered from the conversation, "
        "other questions are delegated to the n8n workflow when configured, with a keyword search over the "
        "law database as fallback."
    ),
    response_description="The answer with its sources and the search method used.",
    responses={
        200: {"description": "Question answered"},
        400: {"description": "Query is missing"},
        401: {"description": "Caller is not authenticated"},
        500: {"description": "Unexpected failure while answering"},
    },
)
async def chat_enhanced(
    body: ChatRequest,
    request: Request,
    user_id: ChatUserDep,
    service: ChatServiceDep,
) -> ChatResponse:
    """
    Answer a chat query.

    - **query**: The user question.
    - **messages**: Previous turns of the conversation, oldest first.
    - **userId**: Client-side user id, used only when no Supabase session is present.
    - **uploadedFiles**: Attachments (with extracted text) forwarded to the workflow.
    """
    if not body.query:
        raise ApiError(400, "Query is required")

    try:
        return await service.answer(body, user_id, get_client_info(request))
    except Exception as e:
        logger.error(f"Error in enhanced chat: {e}", exc_info=True)
        raise ApiError(500, "Internal server error", response=SYSTEM_ERROR_REPLY) from e
