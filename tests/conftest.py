"""Shared fixtures: a recording sink, fake collaborators, and a wired server."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from codescribe.app import build_server
from codescribe.collaborators.models import DirectoryNode
from codescribe.config import ServerConfig, Settings
from codescribe.protocols.mcp.server import MCPServer
from codescribe.tokens.stats import StatsCalculator


class RecordingSink:
    """MessageSink that keeps every outbound message in memory."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def send(self, data: dict[str, Any]) -> None:
        self.messages.append(data)

    def by_id(self, message_id: Any) -> list[dict[str, Any]]:
        return [m for m in self.messages if m.get("id") == message_id]

    def only(self, message_id: Any) -> dict[str, Any]:
        matches = self.by_id(message_id)
        assert len(matches) == 1, f"expected one response for id {message_id!r}, got {matches}"
        return matches[0]


def make_tree(root: str = "/repo", files: tuple[str, ...] = ("a.py", "b.md")) -> DirectoryNode:
    return DirectoryNode(
        name="repo",
        path=root,
        type="directory",
        children=[DirectoryNode(name=f, path=f"{root}/{f}", type="file") for f in files],
    )


def make_collaborators() -> MagicMock:
    """Create a mock :class:`Collaborators` with sensible async defaults."""
    collaborators = MagicMock()
    collaborators.scan_directory = AsyncMock(return_value=make_tree())
    collaborators.assemble_document = AsyncMock(return_value="## a.py\n\n```py\nprint(1)\n```\n\n")
    collaborators.persist_settings = AsyncMock(return_value=True)
    collaborators.package_remote = AsyncMock(return_value="packed remote")
    collaborators.package_local_with_security = AsyncMock(return_value="packed local")
    collaborators.close = AsyncMock()
    return collaborators


@pytest.fixture(autouse=True)
def _offline_tiktoken(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of tiktoken's encoding download."""
    monkeypatch.setattr(
        "codescribe.tokens.stats.count_openai_tokens",
        lambda text, model="gpt-4o": len(text.split()),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(ignore_patterns=["node_modules", "*.log"], anthropic_api_key="")


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def collaborators() -> MagicMock:
    return make_collaborators()


@pytest.fixture
def server(settings: Settings, sink: RecordingSink, collaborators: MagicMock) -> MCPServer:
    return build_server(
        settings,
        ServerConfig(request_timeout=5.0),
        sink,
        collaborators=collaborators,
        stats=StatsCalculator(settings),
    )
