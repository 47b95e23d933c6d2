"""Token counting and document statistics."""

from codescribe.tokens.counter import (
    AnthropicTokenCounter,
    EstimatingCounter,
    TiktokenCounter,
)
from codescribe.tokens.stats import StatsCalculator, TokenStats, count_openai_tokens

__all__ = [
    "AnthropicTokenCounter",
    "EstimatingCounter",
    "StatsCalculator",
    "TiktokenCounter",
    "TokenStats",
    "count_openai_tokens",
]
