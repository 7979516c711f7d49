"""Error types of the outbound HTTP integrations.

Purpose:
- Provide typed exceptions thrown by ``N8nWebhookClient`` and
  ``SupabaseAuthClient``.
- Expose HTTP-oriented context (status code, response body) for diagnosis.

Usage:
- Catch ``IntegrationError`` for any integration failure, or the specific
  subclass, and inspect ``status_code`` / ``details``.
"""

from __future__ import annotations

from typing import Any, Optional


class IntegrationError(Exception):
    """Base error for failures of an external HTTP service.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional payload from the server (e.g., response body).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class N8nWebhookError(IntegrationError):
    """The n8n chat webhook failed (network error, non-2xx status or unreadable body)."""


class SupabaseAuthError(IntegrationError):
    """The Supabase auth service could not verify a token (other than a plain rejection)."""
