"""Token counting — tiktoken for OpenAI models, Anthropic's API for Claude.

Provides accurate counting via tiktoken (for OpenAI-family models), the
Anthropic token-count endpoint when an API key is configured, and a
character-based estimator as a universal fallback.
"""

from __future__ import annotations

import logging
import math

import httpx
import tiktoken

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tiktoken-based counter (accurate for OpenAI models)
# ---------------------------------------------------------------------------

_FALLBACK_ENCODING = "cl100k_base"


class TiktokenCounter:
    """Token counter using tiktoken encodings.

    Falls back to ``cl100k_base`` when the model's encoding is unknown.
    """

    def __init__(self, model: str = "gpt-4o") -> None:
        try:
            self._enc = tiktoken.encoding_for_model(model)
        except KeyError:
            self._enc = tiktoken.get_encoding(_FALLBACK_ENCODING)

    @property
    def encoding_name(self) -> str:
        return self._enc.name

    def count(self, text: str) -> int:
        # Special-token text in user content is counted, not rejected.
        return len(self._enc.encode(text, disallowed_special=()))


# ---------------------------------------------------------------------------
# Estimating counter (universal fallback)
# ---------------------------------------------------------------------------

_CHARS_PER_TOKEN = 4


class EstimatingCounter:
    """Fallback token counter that estimates ~4 characters per token, rounded up."""

    def count(self, text: str) -> int:
        return math.ceil(len(text) / _CHARS_PER_TOKEN)


# ---------------------------------------------------------------------------
# Anthropic API counter (remote, with estimating fallback)
# ---------------------------------------------------------------------------

ANTHROPIC_API_URL = "https://api.anthropic.com"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicTokenCounter:
    """Counts Claude tokens with ``POST /v1/messages/count_tokens``.

    Never raises: a missing key, an HTTP failure, or an unexpected payload
    all fall back to :class:`EstimatingCounter`.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "claude-3-5-sonnet-latest",
        base_url: str = ANTHROPIC_API_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._fallback = EstimatingCounter()

    async def count(self, text: str) -> int:
        if not self._api_key:
            return self._fallback.count(text)

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    "/v1/messages/count_tokens",
                    headers={
                        "x-api-key": self._api_key,
                        "anthropic-version": ANTHROPIC_VERSION,
                    },
                    json={
                        "model": self._model,
                        "messages": [{"role": "user", "content": text}],
                    },
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Anthropic token count failed, using estimate: %s", exc)
            return self._fallback.count(text)

        tokens = data.get("input_tokens") if isinstance(data, dict) else None
        if isinstance(tokens, int):
            return tokens
        logger.warning("Unexpected token-count payload, using estimate")
        return self._fallback.count(text)
