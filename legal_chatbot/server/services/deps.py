"""
Dependency providers for the API endpoints.

The HTTP clients are process-wide singletons created on first use (None when
the service is not configured) and closed on application shutdown.
"""

from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from legal_chatbot.assistant.service import ChatAssistantService
from legal_chatbot.core.database import get_session
from legal_chatbot.integrations.n8n import N8nWebhookClient
from legal_chatbot.integrations.supabase_auth import SupabaseAuthClient
from legal_chatbot.server.core.config import settings

_auth_client: Optional[SupabaseAuthClient] = None
_webhook_client: Optional[N8nWebhookClient] = None


def get_auth_client() -> Optional[SupabaseAuthClient]:
    global _auth_client
    config = settings.supabase
    if not config.is_configured:
        return None
    if _auth_client is None:
        _auth_client = SupabaseAuthClient(config.url, config.api_key, timeout=config.auth_timeout)
    return _auth_client


def get_webhook_client() -> Optional[N8nWebhookClient]:
    global _webhook_client
    config = settings.n8n
    if not config.chat_webhook:
        return None
    if _webhook_client is None:
        _webhook_client = N8nWebhookClient(config.chat_webhook, timeout=config.timeout)
    return _webhook_client


async def close_clients() -> None:
    """Close the shared HTTP clients (application shutdown)."""
    global _auth_client, _webhook_client
    if _auth_client is not None:
        await _auth_client.aclose()
        _auth_client = None
    if _webhook_client is not None:
        await _webhook_client.aclose()
        _webhook_client = None


SessionDep = Annotated[AsyncSession, Depends(get_session)]
AuthClientDep = Annotated[Optional[SupabaseAuthClient], Depends(get_auth_client)]
WebhookClientDep = Annotated[Optional[N8nWebhookClient], Depends(get_webhook_client)]


def get_chat_service(session: SessionDep, webhook: WebhookClientDep) -> ChatAssistantService:
    return ChatAssistantService(session, webhook, topic=settings.n8n.topic)


ChatServiceDep = Annotated[ChatAssistantService, Depends(get_chat_service)]
