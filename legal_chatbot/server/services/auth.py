"""
Caller authentication.

The caller is identified, in order, by:

1. a Supabase access token (``Authorization: Bearer`` header or the Supabase
   auth cookie) verified against the Supabase auth service;
2. a user id sent by the client (``userId`` in the body or query string),
   accepted only when a ``profiles`` row exists for it.

Endpoints turn a missing user into a 401 before touching the database.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from legal_chatbot.assistant.service import ClientInfo
from legal_chatbot.core.database.repositories.profiles import ProfileRepository
from legal_chatbot.core.logging_config import get_logger
from legal_chatbot.integrations.errors import SupabaseAuthError
from legal_chatbot.integrations.supabase_auth import SupabaseAuthClient, extract_access_token
from legal_chatbot.server.errors import ApiError

logger = get_logger(__name__)


def parse_uuid(value: Any) -> Optional[uuid.UUID]:
    """Parse a UUID string, returning None for anything malformed."""
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def get_access_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else from the auth cookies."""
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return extract_access_token(request.cookies)


def get_client_info(request: Request) -> ClientInfo:
    ip_address = request.headers.get("x-forwarded-for") or request.headers.get("x-real-ip") or "unknown"
    return ClientInfo(ip_address=ip_address, user_agent=request.headers.get("user-agent") or "unknown")


async def resolve_user_id(
    request: Request,
    session: AsyncSession,
    auth_client: Optional[SupabaseAuthClient],
    client_user_id: Optional[str] = None,
) -> Optional[uuid.UUID]:
    """Identify the caller of ``request``.

    Args:
        request: Incoming request (headers and cookies)
        session: Database session used to validate ``client_user_id``
        auth_client: Supabase auth client, None when Supabase is not configured
        client_user_id: User id supplied by the client as a fallback

    Returns:
        The caller's user id, or None when unauthenticated
    """
    token = get_access_token(request)
    if token and auth_client is not None:
        try:
            user = await auth_client.get_user(token)
        except SupabaseAuthError as e:
            logger.warning(f"Supabase token verification failed: {e} (status={e.status_code})")
            user = None
        if user is not None:
            user_id = parse_uuid(user.id)
            if user_id is not None:
                logger.debug(f"Authenticated user {user_id} from access token")
                return user_id

    if client_user_id:
        user_id = parse_uuid(client_user_id)
        if user_id is not None and await ProfileRepository(session).exists(user_id):
            logger.debug(f"Authenticated user {user_id} from client-supplied id")
            return user_id
        logger.warning(f"Rejected client-supplied user id: {client_user_id!r}")

    return None


async def require_user(
    request: Request,
    session: AsyncSession,
    auth_client: Optional[SupabaseAuthClient],
    client_user_id: Optional[str] = None,
    **error_fields: Any,
) -> uuid.UUID:
    """Like ``resolve_user_id`` but raises a 401 ``ApiError`` for anonymous callers.

    ``error_fields`` replace the default ``details`` of the 401 body.
    """
    user_id = await resolve_user_id(request, session, auth_client, client_user_id)
    if user_id is None:
        raise ApiError(401, "Unauthorized", **(error_fields or {"details": "Please login first"}))
    return user_id
