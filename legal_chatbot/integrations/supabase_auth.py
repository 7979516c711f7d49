"""Supabase auth (GoTrue) integration.

Two responsibilities:

- read the access token the Supabase SSR helpers store in cookies
  (``sb-<project-ref>-auth-token``, optionally split in ``.0``, ``.1`` chunks,
  holding JSON that may be prefixed with ``base64-``);
- resolve an access token to its user through ``GET /auth/v1/user``.
"""

from __future__ import annotations

import base64
import json
import logging
import re
from typing import Dict, Mapping, Optional
from urllib.parse import unquote

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import SupabaseAuthError

AUTH_COOKIE_PATTERN = re.compile(r"^(sb-.+-auth-token)(?:\.(\d+))?$")
LEGACY_ACCESS_TOKEN_COOKIE = "sb-access-token"
BASE64_PREFIX = "base64-"


class SupabaseUser(BaseModel):
    """Subset of the GoTrue user object used by the application."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    role: Optional[str] = None


def _decode_session_cookie(raw: str) -> Optional[str]:
    value = unquote(raw)
    try:
        if value.startswith(BASE64_PREFIX):
            encoded = value[len(BASE64_PREFIX):]
            encoded += "=" * (-len(encoded) % 4)
            value = base64.urlsafe_b64decode(encoded).decode("utf-8")
        data = json.loads(value)
    except ValueError:
        return None

    if isinstance(data, dict):
        token = data.get("access_token")
    elif isinstance(data, list) and data:
        # supabase-js v1 stored [access_token, refresh_token, ...]
        token = data[0]
    else:
        token = None
    return token if isinstance(token, str) and token else None


def extract_access_token(cookies: Mapping[str, str]) -> Optional[str]:
    """Find the Supabase access token in a request's cookies.

    Args:
        cookies: Cookie name to value mapping

    Returns:
        The access token, or None when no readable auth cookie is present
    """
    whole: Dict[str, str] = {}
    chunks: Dict[str, Dict[int, str]] = {}
    for name, value in cookies.items():
        match = AUTH_COOKIE_PATTERN.match(name)
        if not match:
            continue
        base_name, index = match.group(1), match.group(2)
        if index is None:
            whole[base_name] = value
        else:
            chunks.setdefault(base_name, {})[int(index)] = value

    candidates = list(whole.values())
    for parts in chunks.values():
        candidates.append("".join(parts[i] for i in sorted(parts)))

    for candidate in candidates:
        token = _decode_session_cookie(candidate)
        if token:
            return token

    legacy = cookies.get(LEGACY_ACCESS_TOKEN_COOKIE)
    return legacy or None


class SupabaseAuthClient:
    """
    Async client for the Supabase auth ``/auth/v1/user`` endpoint.

    Only token verification is implemented; sign-in and sign-up stay with the
    web client.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def _headers(self, access_token: str) -> dict[str, str]:
        return {"apikey": self.api_key, "Authorization": f"Bearer {access_token}"}

    async def get_user(self, access_token: str) -> Optional[SupabaseUser]:
        """Resolve an access token to its user.

        Returns:
            The user, or None when Supabase rejects the token (401/403)

        Raises:
            SupabaseAuthError: when the auth service is unreachable, fails or answers with an unusable body
        """
        try:
            self._logger.debug("SupabaseAuthClient.get_user: GET %s/auth/v1/user", self.base_url)
            r = await self._client.get(f"{self.base_url}/auth/v1/user", headers=self._headers(access_token))
            if r.status_code in (401, 403):
                return None
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SupabaseAuthError(
                f"Supabase get_user failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise SupabaseAuthError(f"Supabase auth unreachable: {e}") from e

        try:
            data = r.json()
        except ValueError as e:
            raise SupabaseAuthError("Invalid JSON from get_user", status_code=r.status_code, details=r.text) from e
        if not isinstance(data, dict) or not data.get("id"):
            raise SupabaseAuthError("Unexpected response shape from get_user", status_code=r.status_code, details=data)
        try:
            return SupabaseUser.model_validate(data)
        except ValidationError as e:
            raise SupabaseAuthError(
                f"Invalid user payload from get_user: {e.error_count()} errors", status_code=r.status_code, details=data
            ) from e

    async def aclose(self) -> None:
        await self._client.aclose()
