"""
Tests for the chat endpoint (POST /api/chat-enhanced).
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from legal_chatbot.assistant.service import GREETING_REPLY, LEGAL_ANSWER_TEMPLATE, ChatAssistantService
from legal_chatbot.core.database.entities.laws import Law
from legal_chatbot.core.database.repositories.activity_logs import QueryLogRepository, UserActivityRepository
from legal_chatbot.server.api.chat import LOGIN_REQUIRED_REPLY, SYSTEM_ERROR_REPLY

pytestmark = pytest.mark.asyncio

URL = "/api/chat-enhanced"


@pytest.fixture
async def labour_law(session) -> Law:
    law = Law(
        title="Luật Lao động 2019",
        so_hieu="45/2019/QH14",
        noi_dung="Quy định về hợp đồng lao động, tiền lương và thời giờ làm việc.",
        link="https://example.vn/luat-lao-dong",
    )
    session.add(law)
    await session.commit()
    await session.refresh(law)
    return law


class TestAuthentication:
    async def test_anonymous_request_is_rejected(self, client, session):
        response = await client.post(URL, json={"query": "Quy định về hợp đồng lao động"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized", "response": LOGIN_REQUIRED_REPLY}
        assert await QueryLogRepository(session).list() == []

    async def test_anonymous_invalid_body_is_rejected_before_validation(self, client):
        response = await client.post(URL, json={"query": "x", "messages": "not a list"})

        assert response.status_code == 401
        assert response.json()["response"] == LOGIN_REQUIRED_REPLY

    async def test_unknown_client_user_id_is_rejected(self, client):
        response = await client.post(URL, json={"query": "Chào bạn", "userId": str(uuid.uuid4())})

        assert response.status_code == 401

    async def test_malformed_client_user_id_is_rejected(self, client):
        response = await client.post(URL, json={"query": "Chào bạn", "userId": "not-a-uuid"})

        assert response.status_code == 401

    async def test_bearer_token_is_verified_with_supabase(self, client, session, use_auth_client):
        token_user = str(uuid.uuid4())
        use_auth_client(token_user)

        response = await client.post(
            URL, json={"query": "Chào bạn"}, headers={"Authorization": "Bearer valid-token"}
        )

        assert response.status_code == 200
        activities = await UserActivityRepository(session).list_for_user(uuid.UUID(token_user))
        assert len(activities) == 1

    async def test_rejected_token_falls_back_to_client_user_id(self, client, user_id, use_auth_client):
        use_auth_client(None)

        response = await client.post(
            URL,
            json={"query": "Chào bạn", "userId": user_id},
            headers={"Authorization": "Bearer expired-token"},
        )

        assert response.status_code == 200


class TestAnswers:
    async def test_greeting(self, client, user_id):
        response = await client.post(URL, json={"query": "Xin chào", "userId": user_id})

        assert response.status_code == 200
        body = response.json()
        assert body["response"] == GREETING_REPLY
        assert body["search_method"] == "greeting"
        assert body["sources"] == []

    async def test_local_search_hit(self, client, user_id, labour_law, session):
        query = "Quy định về hợp đồng lao động"

        response = await client.post(URL, json={"query": query, "userId": user_id})

        body = response.json()
        assert body["search_method"] == "external"
        assert body["response"] == LEGAL_ANSWER_TEMPLATE.format(query=query)
        assert body["matched_ids"] == [labour_law.id]
        logs = await QueryLogRepository(session).list()
        assert [log.query for log in logs] == [query]

    async def test_document_number_counts_as_legal_question(self, client, user_id):
        response = await client.post(URL, json={"query": "Quyết định 25/2017/QĐ-UBND", "userId": user_id})

        body = response.json()
        assert response.status_code == 200
        assert body["search_method"] == "external"
        assert body["response"].startswith("Xin lỗi, tôi không tìm thấy thông tin pháp luật cụ thể")

    async def test_client_ip_is_recorded(self, client, user_id, session):
        await client.post(
            URL,
            json={"query": "Chào bạn", "userId": user_id},
            headers={"X-Forwarded-For": "203.0.113.7", "User-Agent": "pytest-client"},
        )

        activities = await UserActivityRepository(session).list_for_user(uuid.UUID(user_id))
        assert activities[0].ip_address == "203.0.113.7"
        assert activities[0].user_agent == "pytest-client"


class TestErrors:
    async def test_empty_query_is_rejected(self, client, user_id):
        response = await client.post(URL, json={"query": "", "userId": user_id})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Query is required"}

    async def test_missing_query_is_rejected(self, client, user_id):
        response = await client.post(URL, json={"userId": user_id})

        assert response.status_code == 400

    async def test_invalid_body_is_a_client_error(self, client, user_id):
        response = await client.post(URL, json={"query": "x", "messages": "not a list", "userId": user_id})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    async def test_service_failure_returns_500(self, client, user_id):
        with (
            patch.object(ChatAssistantService, "answer", AsyncMock(side_effect=RuntimeError("boom"))),
            patch("legal_chatbot.server.api.chat.logger") as mock_logger,
        ):
            response = await client.post(URL, json={"query": "Luật đất đai", "userId": user_id})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Internal server error",
            "response": SYSTEM_ERROR_REPLY,
        }
        mock_logger.error.assert_called_once()
