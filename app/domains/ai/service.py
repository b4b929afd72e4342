"""Completion proxy to an OpenAI-compatible chat completions API."""

import logging
from typing import Any

import httpx

from app.core.config import Settings, settings
from app.exceptions.ai import CompletionConfigurationError, CompletionServiceError
from app.schemas.ai import CompletionRequest

logger = logging.getLogger(__name__)


class CompletionService:
    """Forwards a message list upstream and returns the raw completion.

    No retries and no streaming; the HTTP client's default timeout applies.
    """

    def __init__(self, config: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.config = config or settings
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.config.completion_api_base_url.rstrip('/')}/chat/completions"

    def clamp_max_tokens(self, requested: int | None) -> int:
        """Clamp the caller's hint to the hard ceiling."""
        wanted = requested or self.config.completion_default_max_tokens
        return min(wanted, self.config.completion_max_tokens_ceiling)

    def build_payload(self, request: CompletionRequest) -> dict[str, Any]:
        return {
            "model": request.model or self.config.completion_default_model,
            "messages": [
                {"role": message.role, "content": message.content} for message in request.messages
            ],
            "max_tokens": self.clamp_max_tokens(request.max_tokens),
            "temperature": self.config.completion_temperature,
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        return await client.post(
            self.endpoint,
            json=payload,
            headers={"Authorization": f"Bearer {self.config.completion_api_key}"},
        )

    async def complete(self, request: CompletionRequest) -> dict[str, Any]:
        """Return the upstream completion object unmodified.

        Raises:
            CompletionServiceError: On any upstream failure; the cause is logged
        """
        if not self.config.completion_api_key:
            logger.error("Completion API key not configured")
            raise CompletionConfigurationError()

        payload = self.build_payload(request)
        try:
            if self._client is not None:
                response = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Completion API returned %s: %s", e.response.status_code, e.response.text[:500]
            )
            raise CompletionServiceError() from e
        except httpx.HTTPError as e:
            logger.error("Completion API request failed: %s", e)
            raise CompletionServiceError() from e
        except ValueError as e:
            logger.error("Completion API returned invalid JSON: %s", e)
            raise CompletionServiceError() from e
