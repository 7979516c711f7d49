"""
Chat answering service.

``ChatAssistantService.answer`` runs one chat query through the pipeline, the
first step producing an answer wins:

1. follow-up answering from the last assistant message (no search, no audit),
2. greeting,
3. delegation to the n8n workflow (any failure falls through),
4. local keyword search over ``laws``, then the static external catalogue,
5. canned replies for legal queries without hits and for non-legal queries.

Every answered query except follow-ups is written to ``user_activities``, and
every answer except greetings to ``query_logs``. Audit failures never reach
the caller.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from legal_chatbot.core import monitoring
from legal_chatbot.core.database.entities.activity_logs import QueryLog, UserActivity
from legal_chatbot.core.database.repositories.activity_logs import QueryLogRepository, UserActivityRepository
from legal_chatbot.core.database.repositories.laws import LawRepository
from legal_chatbot.core.models.io.chat import ChatRequest, ChatResponse, LawSource
from legal_chatbot.integrations.errors import N8nWebhookError
from legal_chatbot.integrations.n8n import N8nWebhookClient

from .classifier import QueryClassification, classify_query
from .external_sources import search_external_sources
from .ranking import DEFAULT_TITLE, HISTORY_TURNS, build_search_base, law_to_source, rank_laws, tokenize
from .summarizer import SUMMARY_PREFIX, answer_follow_up, summarize_text

logger = logging.getLogger(__name__)

GREETING_REPLY = (
    "Chào bạn! Tôi là trợ lý AI chuyên về pháp luật Việt Nam. Tôi có thể hỗ trợ bạn trả lời các câu hỏi về "
    "pháp luật, văn bản pháp luật, quy định pháp lý và các vấn đề liên quan. Bạn có câu hỏi gì về pháp luật không?"
)
SOURCE_LINKS_REPLY = "Dưới đây là các liên kết tham khảo."
LEGAL_ANSWER_TEMPLATE = (
    "Dựa trên các quy định pháp luật Việt Nam, tôi có thể trả lời câu hỏi của bạn:\n\n{query}\n\n"
    "Lưu ý: Đây là thông tin tham khảo, bạn nên tham khảo thêm ý kiến của luật sư hoặc cơ quan có thẩm quyền "
    "để có lời khuyên chính xác nhất."
)
NOT_FOUND_TEMPLATE = (
    'Xin lỗi, tôi không tìm thấy thông tin pháp luật cụ thể liên quan đến câu hỏi "{query}" trong cơ sở dữ liệu '
    "hiện tại. Bạn có thể:\n\n"
    "1. Thử diễn đạt câu hỏi theo cách khác\n"
    "2. Liên hệ với luật sư để được tư vấn chuyên sâu\n"
    "3. Tham khảo các nguồn pháp luật chính thức như:\n"
    "   - Thư viện Pháp luật (thuvienphapluat.vn)\n"
    "   - Cổng thông tin điện tử Chính phủ (vanban.chinhphu.vn)"
)
INTRODUCTION_REPLY = (
    "Tôi là trợ lý AI chuyên về pháp luật Việt Nam. Tôi có thể hỗ trợ bạn trả lời các câu hỏi về pháp luật, "
    "văn bản pháp luật, quy định pháp lý và các vấn đề liên quan.\n\n"
    "Nếu bạn có câu hỏi về pháp luật, vui lòng đặt câu hỏi cụ thể. Ví dụ:\n"
    '- "Quy định về hợp đồng lao động"\n'
    '- "Luật về thừa kế"\n'
    '- "Quyền và nghĩa vụ của người lao động"'
)
WEBHOOK_FALLBACK_REPLY = "Xin lỗi, không thể xử lý câu hỏi của bạn."

WEBHOOK_SOURCE_CATEGORY = "n8n"
MAX_LOGGED_QUERY_LENGTH = 500


@dataclass(frozen=True)
class ClientInfo:
    """Request metadata stored with audited activities."""

    ip_address: str = "unknown"
    user_agent: str = "unknown"


def build_conversation_context(previous_messages: Sequence[Mapping[str, Any]]) -> str:
    """Render the last ten turns as ``Người dùng: ...`` / ``Trợ lý AI: ...`` paragraphs."""
    lines = []
    for message in list(previous_messages)[-HISTORY_TURNS:]:
        role = "Người dùng" if message.get("role") == "user" else "Trợ lý AI"
        lines.append(f"{role}: {message.get('content', '')}")
    return "\n\n".join(lines)


def normalize_webhook_sources(raw_sources: Sequence[Any]) -> List[LawSource]:
    """Turn the workflow's free-form source dicts into ``LawSource`` entries.

    Entries without both title and id are dropped, as are entries whose
    fields cannot be coerced.
    """
    sources: List[LawSource] = []
    for raw in raw_sources:
        if not isinstance(raw, dict) or not (raw.get("title") or raw.get("id")):
            continue
        try:
            sources.append(
                LawSource(
                    id=raw.get("id"),
                    title=raw.get("title") or DEFAULT_TITLE,
                    article_reference=raw.get("article_reference") or None,
                    source=raw.get("source") or raw.get("link") or None,
                    link=raw.get("link") or raw.get("source") or None,
                    so_hieu=raw.get("so_hieu") or None,
                    loai_van_ban=raw.get("loai_van_ban") or None,
                    category=raw.get("category") or WEBHOOK_SOURCE_CATEGORY,
                )
            )
        except ValidationError:
            logger.warning(f"Dropping malformed webhook source: {raw!r}")
    return sources


class ChatAssistantService:
    """Answers chat queries for one request (bound to its database session)."""

    def __init__(
        self,
        session: AsyncSession,
        webhook: Optional[N8nWebhookClient] = None,
        *,
        topic: str = "logistics",
    ) -> None:
        self.session = session
        self.webhook = webhook
        self.topic = topic
        self.laws = LawRepository(session)
        self.query_logs = QueryLogRepository(session)
        self.activities = UserActivityRepository(session)

    async def answer(self, request: ChatRequest, user_id: uuid.UUID, client: ClientInfo) -> ChatResponse:
        """Answer ``request.query`` on behalf of ``user_id``.

        Args:
            request: Validated chat request; ``query`` must be non-empty
            user_id: Authenticated caller
            client: Caller IP and user agent for the activity trail

        Returns:
            The chat response
        """
        query = request.query or ""
        history = [turn.model_dump() for turn in request.messages]
        flags = classify_query(query, history)

        follow_up = self._answer_follow_up(query, history, flags)
        if follow_up is not None:
            logger.debug("Answered as follow-up from conversation history")
            return ChatResponse(response=follow_up, search_method="follow-up")

        if flags.is_greeting:
            response = ChatResponse(response=GREETING_REPLY, search_method="greeting")
            await self._record_activity(user_id, query, client, 0, "greeting", [])
            monitoring.log_chat_query("greeting", 0, 0)
            return response

        if self.webhook is not None:
            delegated = await self._delegate(self.webhook, request, user_id, client, history, flags)
            if delegated is not None:
                return delegated

        response = await self._search(query, history, flags)
        await self._record_query(user_id, query, response.response, response.total_sources, response.matched_ids)
        await self._record_activity(
            user_id, query, client, response.total_sources, response.search_method, response.matched_ids
        )
        monitoring.log_chat_query(response.search_method, response.total_sources, len(response.matched_ids))
        return response

    def _answer_follow_up(
        self, query: str, history: List[Dict[str, Any]], flags: QueryClassification
    ) -> Optional[str]:
        if not (flags.is_follow_up and history):
            return None
        last_answer = next((m for m in reversed(history) if m.get("role") == "assistant"), None)
        if last_answer is None:
            return None
        # Legal summaries go to the workflow when one is configured
        delegate_summary = self.webhook is not None and flags.is_legal
        return answer_follow_up(
            query, str(last_answer.get("content") or ""), flags.wants_summary and not delegate_summary
        )

    async def _delegate(
        self,
        webhook: N8nWebhookClient,
        request: ChatRequest,
        user_id: uuid.UUID,
        client: ClientInfo,
        history: List[Dict[str, Any]],
        flags: QueryClassification,
    ) -> Optional[ChatResponse]:
        """Ask the n8n workflow; None means fall back to local search."""
        query = request.query or ""
        payload = {
            "query": query,
            "userId": str(user_id),
            "messages": history,
            "context": build_conversation_context(history),
            "topic": self.topic,
            "wantsSummary": flags.wants_summary,
            "uploadedFiles": [f.model_dump(by_alias=True, exclude_none=True) for f in request.uploaded_files],
        }
        try:
            answer = await webhook.ask(payload)
        except N8nWebhookError as e:
            logger.warning(f"n8n webhook failed, falling back to local search: {e} (status={e.status_code})")
            monitoring.log_error("N8nWebhookError", str(e), {"status_code": e.status_code})
            return None

        sources = normalize_webhook_sources(answer.sources)
        await self._record_activity(user_id, query, client, len(sources), "n8n", answer.matched_ids)
        await self._record_query(user_id, query, answer.response or "", len(sources), answer.matched_ids)

        if flags.wants_summary:
            monitoring.log_chat_query("n8n-summary", 0, len(answer.matched_ids))
            return ChatResponse(
                response=SUMMARY_PREFIX + summarize_text(answer.response or ""),
                matched_ids=answer.matched_ids,
                search_method="n8n-summary",
            )

        links = [source.to_link().model_dump() for source in sources] if flags.explicit_source_request else []
        monitoring.log_chat_query("n8n", len(links), len(answer.matched_ids))
        return ChatResponse(
            response=answer.response or WEBHOOK_FALLBACK_REPLY,
            sources=links,
            matched_ids=answer.matched_ids,
            total_sources=len(links),
            search_method="n8n",
        )

    async def _search(self, query: str, history: List[Dict[str, Any]], flags: QueryClassification) -> ChatResponse:
        if not flags.is_legal:
            return ChatResponse(response=INTRODUCTION_REPLY, search_method="none")

        search_base = build_search_base(query, history)
        phrase = search_base.lower()
        terms = tokenize(search_base)

        try:
            candidates = await self.laws.search_candidates(terms, phrase)
        except SQLAlchemyError as e:
            logger.error(f"Local law search failed, using the external catalogue: {e}")
            await self.session.rollback()
            candidates = []

        sources: List[LawSource]
        matched_ids: List[Any]
        if candidates:
            ranked = rank_laws(candidates, phrase, terms)
            sources = [law_to_source(item.law) for item in ranked]
            matched_ids = [item.law.id for item in ranked]
            logger.debug(f"Local search: {len(candidates)} candidates, {len(ranked)} relevant")
        else:
            entries = search_external_sources(query)
            sources = [entry.to_source() for entry in entries]
            matched_ids = [entry.id for entry in entries]
            logger.debug(f"External catalogue search: {len(entries)} entries")

        if not sources:
            return ChatResponse(
                response=NOT_FOUND_TEMPLATE.format(query=query), matched_ids=matched_ids, search_method="external"
            )

        # search_method follows the returned sources; only link replies carry any
        if flags.explicit_source_request:
            links = [source.to_link().model_dump() for source in sources]
            return ChatResponse(
                response=SOURCE_LINKS_REPLY,
                sources=links,
                matched_ids=matched_ids,
                total_sources=len(links),
                search_method="local",
            )

        return ChatResponse(
            response=LEGAL_ANSWER_TEMPLATE.format(query=query), matched_ids=matched_ids, search_method="external"
        )

    async def _record_query(
        self, user_id: uuid.UUID, query: str, response: str, sources_count: int, matched_ids: List[Any]
    ) -> None:
        try:
            await self.query_logs.create(
                QueryLog(
                    user_id=user_id,
                    query=query,
                    response=response,
                    sources_count=sources_count,
                    matched_ids=list(matched_ids),
                )
            )
        except SQLAlchemyError as e:
            logger.error(f"Error logging query: {e}")
            await self.session.rollback()

    async def _record_activity(
        self,
        user_id: uuid.UUID,
        query: str,
        client: ClientInfo,
        sources_count: int,
        search_method: str,
        matched_ids: List[Any],
    ) -> None:
        try:
            await self.activities.create(
                UserActivity(
                    user_id=user_id,
                    activity_type="query",
                    action="chat_query",
                    details={
                        "query": query[:MAX_LOGGED_QUERY_LENGTH],
                        "sourcesCount": sources_count,
                        "searchMethod": search_method,
                        "matchedIds": list(matched_ids),
                    },
                    ip_address=client.ip_address,
                    user_agent=client.user_agent,
                    risk_level="low",
                )
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to log chat activity: {e}")
            await self.session.rollback()
