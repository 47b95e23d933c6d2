"""Configuration — user settings and server tuning knobs."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

REDACTED = "[REDACTED]"

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    ".DS_Store",
    ".env",
    "*.log",
    "*.lock",
    "package-lock.json",
    "*.min.js",
    "*.min.css",
)


class Settings(BaseModel):
    """User settings shared by every request.

    Keys the server does not know about are kept as extras so a settings
    file written by another front end round-trips unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    ignore_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS),
        alias="ignorePatterns",
    )
    anthropic_api_key: str = Field(default="", alias="anthropicApiKey")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def redacted(self) -> dict[str, Any]:
        """Shallow copy safe to hand to clients: the API key is never included."""
        content = self.to_wire()
        if content.get("anthropicApiKey"):
            content["anthropicApiKey"] = REDACTED
        return content


class ServerConfig(BaseModel):
    """Runtime knobs for the stdio server and its collaborators."""

    request_timeout: float | None = Field(
        default=600.0,
        description="Per-request deadline in seconds; None disables it.",
    )
    max_line_bytes: int | None = Field(
        default=64 * 1024 * 1024,
        description="Largest accepted inbound line; None disables the limit.",
    )
    repomix_command: list[str] = Field(
        default_factory=lambda: ["npx", "--yes", "repomix"],
        description="Command prefix used to invoke repomix.",
    )
    temp_dir: Path | None = Field(
        default=None,
        description="Scratch directory for repomix output; defaults to the system temp dir.",
    )
    anthropic_model: str = Field(
        default="claude-3-5-sonnet-latest",
        description="Model passed to the Anthropic token-count endpoint.",
    )
