"""
HTTP clients for the external services the chatbot depends on.
"""

from .errors import IntegrationError, N8nWebhookError, SupabaseAuthError
from .n8n import N8nAnswer, N8nWebhookClient
from .supabase_auth import SupabaseAuthClient, SupabaseUser, extract_access_token

__all__ = [
    "IntegrationError",
    "N8nAnswer",
    "N8nWebhookClient",
    "N8nWebhookError",
    "SupabaseAuthClient",
    "SupabaseAuthError",
    "SupabaseUser",
    "extract_access_token",
]
