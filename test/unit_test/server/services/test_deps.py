"""Unit tests for server service dependencies.

Tests verify the lazily created HTTP clients and the Annotated dependency
aliases used by the endpoints.
"""

from unittest.mock import patch

import pytest

from legal_chatbot.assistant.service import ChatAssistantService
from legal_chatbot.integrations.n8n import N8nWebhookClient
from legal_chatbot.integrations.supabase_auth import SupabaseAuthClient
from legal_chatbot.server.services import deps


@pytest.fixture(autouse=True)
def reset_clients():
    deps._auth_client = None
    deps._webhook_client = None
    yield
    deps._auth_client = None
    deps._webhook_client = None


class TestAuthClient:
    def test_created_once_when_configured(self):
        with patch.object(deps, "settings") as mock_settings:
            mock_settings.supabase.is_configured = True
            mock_settings.supabase.url = "http://mock-supabase"
            mock_settings.supabase.api_key = "key"
            mock_settings.supabase.auth_timeout = 5.0

            first = deps.get_auth_client()
            second = deps.get_auth_client()

        assert isinstance(first, SupabaseAuthClient)
        assert first is second
        assert first.base_url == "http://mock-supabase"

    def test_none_when_not_configured(self):
        with patch.object(deps, "settings") as mock_settings:
            mock_settings.supabase.is_configured = False

            assert deps.get_auth_client() is None


class TestWebhookClient:
    def test_created_from_settings(self):
        with patch.object(deps, "settings") as mock_settings:
            mock_settings.n8n.chat_webhook = "http://mock/webhook/chat"
            mock_settings.n8n.timeout = 30.0

            client = deps.get_webhook_client()

        assert isinstance(client, N8nWebhookClient)
        assert deps.get_webhook_client() is client

    def test_none_without_webhook(self):
        with patch.object(deps, "settings") as mock_settings:
            mock_settings.n8n.chat_webhook = ""

            assert deps.get_webhook_client() is None


class TestCloseClients:
    @pytest.mark.asyncio
    async def test_close_resets_clients(self):
        with patch.object(deps, "settings") as mock_settings:
            mock_settings.n8n.chat_webhook = "http://mock/webhook/chat"
            mock_settings.n8n.timeout = 30.0
            deps.get_webhook_client()

        await deps.close_clients()

        assert deps._webhook_client is None
        assert deps._auth_client is None


class TestDependencyAliases:
    @pytest.mark.parametrize(
        "alias, provider",
        [
            (deps.AuthClientDep, deps.get_auth_client),
            (deps.WebhookClientDep, deps.get_webhook_client),
            (deps.ChatServiceDep, deps.get_chat_service),
        ],
    )
    def test_alias_uses_provider(self, alias, provider):
        depends_obj = alias.__metadata__[0]

        assert depends_obj.dependency == provider

    def test_chat_service_uses_configured_topic(self):
        with patch.object(deps, "settings") as mock_settings:
            mock_settings.n8n.topic = "banking"

            service = deps.get_chat_service(session=None, webhook=None)

        assert isinstance(service, ChatAssistantService)
        assert service.topic == "banking"
