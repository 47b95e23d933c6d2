"""Document statistics shared by every tool that returns text."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, Field

from codescribe.tokens.counter import AnthropicTokenCounter, TiktokenCounter

if TYPE_CHECKING:
    from codescribe.config import Settings

logger = logging.getLogger(__name__)

UNAVAILABLE = -1


class TokenStats(BaseModel):
    """Character count and two token-count estimates for one text."""

    model_config = {"populate_by_name": True}

    character_count: int = Field(alias="characterCount")
    open_ai_tokens: int = Field(alias="openAiTokens")
    claude_tokens: int = Field(alias="claudeTokens")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def count_openai_tokens(text: str, model: str = "gpt-4o") -> int:
    """Count tokens with tiktoken, returning ``-1`` on any failure."""
    try:
        return TiktokenCounter(model).count(text)
    except Exception as exc:  # noqa: BLE001
        logger.warning("tiktoken count failed: %s", exc)
        return UNAVAILABLE


class StatsCalculator:
    """Computes :class:`TokenStats` against the live settings.

    The Anthropic key is read from *settings* on every call so a reloaded
    key takes effect without rebuilding the calculator.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        anthropic_model: str = "claude-3-5-sonnet-latest",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._anthropic_model = anthropic_model
        self._transport = transport

    async def compute(self, text: str, *, model: str | None = None) -> TokenStats:
        openai_model = model if model and model != "claude" else "gpt-4o"
        open_ai_tokens = await asyncio.to_thread(count_openai_tokens, text, openai_model)

        claude = AnthropicTokenCounter(
            self._settings.anthropic_api_key,
            model=self._anthropic_model,
            transport=self._transport,
        )
        claude_tokens = await claude.count(text)

        return TokenStats(
            character_count=len(text),
            open_ai_tokens=open_ai_tokens,
            claude_tokens=claude_tokens,
        )
