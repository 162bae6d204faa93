"""
CompletionClient — Async wrapper around the OpenAI chat-completions API.

Talks to the REST endpoint directly with httpx; the server-held key is
sent as a bearer token and never leaves this module.

Supports two runtime modes (set via AI_MOCK_MODE env var):
  - MOCK mode: returns deterministic canned replies.
    Use for tests and local dev without an API key.
  - REAL mode (default): makes actual API calls.
    Requires OPENAI_API_KEY to be set — unlike the optional adapters,
    a missing key is a ConfigurationError, not a silent fallback.

Extension pattern: add new mock reply keys to _MOCK_RESPONSES and
reference them in complete() calls via the response_key parameter.
"""

import logging
from typing import Any

import httpx

from craft_gateway.core.config import settings
from craft_gateway.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

# Canned replies for mock mode.
# Keys map to response_key arguments in complete() calls.
_MOCK_RESPONSES: dict[str, str] = {
    "default": '{"name": "Mystery", "emoji": "❓"}',
    "combine": '```json\n{"name": "Steam", "emoji": "💨"}\n```',
}


class CompletionClient:
    """
    Central completion interface for the gateway.

    Don't instantiate per-request; routes receive the module-level
    `completion_client` singleton through get_completion_client().
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.mock_mode = settings.ai_mock_mode
        self.api_key = settings.openai_api_key
        self.base_url = settings.openai_base_url.rstrip("/")
        self.model = settings.openai_model
        self.timeout = settings.openai_timeout_seconds
        # Tests inject httpx.MockTransport here.
        self._transport = transport

        if self.mock_mode:
            logger.info("CompletionClient initialised in MOCK mode")
        elif not self.api_key:
            logger.warning("OPENAI_API_KEY not set — craft requests will fail until it is configured")
        else:
            logger.info("CompletionClient initialised in REAL mode (model: %s)", self.model)

    @property
    def configured(self) -> bool:
        return self.mock_mode or bool(self.api_key)

    async def complete(
        self,
        messages: list[dict[str, str]],
        response_key: str = "default",
        **params: Any,
    ) -> str:
        """
        Run one chat completion and return the reply text.

        Args:
            messages:     Chat messages (role/content dicts).
            response_key: Mock reply key (ignored in real mode).
            **params:     Extra request fields, e.g. temperature, max_tokens.

        Returns:
            The assistant message content, whitespace-trimmed.

        Raises:
            ConfigurationError: no API key in real mode.
            UpstreamError:      non-2xx status, transport failure, timeout,
                                or a response without message content.
        """
        if self.mock_mode:
            return _MOCK_RESPONSES.get(response_key, _MOCK_RESPONSES["default"])

        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY not set in environment variables")

        body = {"model": self.model, "messages": messages, **params}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=body,
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "OpenAI API error: %s — %s",
                    exc.response.status_code,
                    exc.response.text[:200],
                )
                raise UpstreamError(
                    f"OpenAI returned HTTP {exc.response.status_code}",
                    public_message="AI service error",
                ) from exc
            except httpx.TimeoutException as exc:
                logger.error("OpenAI request timed out after %.1fs", self.timeout)
                raise UpstreamError(f"OpenAI request timed out: {exc}") from exc
            except httpx.HTTPError as exc:
                logger.error("OpenAI request failed: %s", exc)
                raise UpstreamError(f"OpenAI request failed: {exc}") from exc
            except ValueError as exc:
                raise UpstreamError(f"OpenAI returned a non-JSON body: {exc}") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise UpstreamError(f"Unexpected OpenAI response shape: {str(data)[:200]}") from exc
        if not isinstance(content, str):
            raise UpstreamError("OpenAI reply has no text content")
        return content.strip()


# Module-level singleton — routes get it via get_completion_client()
completion_client = CompletionClient()


def get_completion_client() -> CompletionClient:
    """FastAPI dependency — override in tests to fake the upstream."""
    return completion_client
