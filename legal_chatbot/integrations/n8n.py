from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import N8nWebhookError


class N8nAnswer(BaseModel):
    """Answer returned by the n8n chat workflow."""

    model_config = ConfigDict(extra="ignore")

    response: Optional[str] = None
    sources: List[Dict[str, Any]] = Field(default_factory=list)
    matched_ids: List[Any] = Field(default_factory=list)


class N8nWebhookClient:
    """
    Async HTTP client for the n8n workflow answering chat queries.

    The workflow receives the query with its conversation context as JSON and
    replies with ``{response, sources, matched_ids}``. The client neither
    retries nor interprets the answer; callers decide how to fall back.
    """

    def __init__(
        self,
        webhook_url: str,
        *,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.webhook_url = webhook_url
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    async def ask(self, payload: Dict[str, Any]) -> N8nAnswer:
        """POST one chat payload to the webhook.

        Raises:
            N8nWebhookError: on network failure, non-2xx status or a body that
                is not a JSON object.
        """
        try:
            self._logger.debug("N8nWebhookClient.ask: POST %s", self.webhook_url)
            r = await self._client.post(self.webhook_url, headers=self._headers(), json=payload)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise N8nWebhookError(
                f"n8n webhook failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise N8nWebhookError(f"n8n webhook unreachable: {e}") from e

        try:
            data = r.json()
        except ValueError as e:
            raise N8nWebhookError("n8n webhook returned a non-JSON body", status_code=r.status_code, details=r.text) from e

        # "Respond to Webhook" nodes may wrap the item in a list
        if isinstance(data, list) and data and isinstance(data[0], dict):
            data = data[0]
        if not isinstance(data, dict):
            raise N8nWebhookError("Unexpected response shape from n8n webhook", status_code=r.status_code, details=data)

        try:
            answer = N8nAnswer.model_validate(data)
        except ValidationError as e:
            raise N8nWebhookError("Invalid n8n answer", status_code=r.status_code, details=data) from e
        self._logger.debug("N8nWebhookClient.ask: got %d sources", len(answer.sources))
        return answer

    async def aclose(self) -> None:
        await self._client.aclose()
