"""Legal Chatbot.

Backend service for a Vietnamese legal-assistant chatbot.

High-level architecture
-----------------------

Every chat request flows through one pipeline:

- **Classification**: rule-based heuristics decide whether a query is a
  greeting, a follow-up on the previous answer, a legal question, or an
  explicit request for source links.
- **Answering**: follow-ups are answered from the last assistant message,
  everything else is delegated to an n8n workflow webhook. When the webhook is
  not configured or fails, a keyword-scored search over the ``laws`` table
  takes over.
- **Audit**: each answered query is written to ``query_logs`` and
  ``user_activities``. Audit failures never break a reply.

Core subpackages
----------------

- ``legal_chatbot.assistant``: classifier, follow-up summarizer, local search
  ranking and the chat orchestration service.
- ``legal_chatbot.documents``: text extraction for uploaded legal documents and
  regex-based metadata extraction (số hiệu, dates, signer, issuing body).
- ``legal_chatbot.integrations``: HTTP clients for Supabase auth and the n8n
  chat webhook.
- ``legal_chatbot.core``: logging, monitoring and the SQLModel database layer.
- ``legal_chatbot.server``: the FastAPI application and its routers.
"""
