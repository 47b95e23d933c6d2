"""Server assembly — wires settings, collaborators, tools and transport."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import TYPE_CHECKING

from codescribe import __version__
from codescribe.collaborators.errors import PackagingError
from codescribe.collaborators.provider import LocalCollaborators
from codescribe.collaborators.repomix import RepomixPackager
from codescribe.protocols.mcp.models import ServerInfo
from codescribe.protocols.mcp.server import MCPServer
from codescribe.protocols.mcp.transport import LineWriter, open_stdin_reader
from codescribe.protocols.registry import CapabilityRegistry
from codescribe.tokens.stats import StatsCalculator
from codescribe.tools.handlers import DocumentationTools

if TYPE_CHECKING:
    from codescribe.collaborators.provider import Collaborators
    from codescribe.collaborators.settings_store import SettingsStore
    from codescribe.config import ServerConfig, Settings
    from codescribe.protocols.mcp.transport import MessageSink

logger = logging.getLogger(__name__)

SERVER_NAME = "Markdown Generator MCP Server"
PROTOCOL_VERSION = "0.1"


def server_info() -> ServerInfo:
    return ServerInfo(
        server_name=SERVER_NAME,
        server_version=__version__,
        protocol_version=PROTOCOL_VERSION,
    )


def build_registry(
    settings: Settings,
    collaborators: Collaborators,
    stats: StatsCalculator,
) -> CapabilityRegistry:
    registry = CapabilityRegistry()
    DocumentationTools(settings, collaborators, stats).register(registry)
    return registry


def build_collaborators(config: ServerConfig, store: SettingsStore | None = None) -> LocalCollaborators:
    packager = RepomixPackager(config.repomix_command, temp_dir=config.temp_dir)
    return LocalCollaborators(store=store, packager=packager)


async def prepare_collaborators(
    config: ServerConfig,
    store: SettingsStore | None = None,
) -> LocalCollaborators:
    """Build the collaborators and initialise repomix.

    A packager that cannot initialise is left out: the server still starts
    and the packaging tools report that repomix is unavailable.
    """
    packager = RepomixPackager(config.repomix_command, temp_dir=config.temp_dir)
    try:
        await packager.initialize()
    except PackagingError as exc:
        logger.warning("Repomix integration disabled: %s", exc)
        return LocalCollaborators(store=store)
    return LocalCollaborators(store=store, packager=packager)


def build_server(
    settings: Settings,
    config: ServerConfig,
    sink: MessageSink,
    *,
    collaborators: Collaborators | None = None,
    stats: StatsCalculator | None = None,
) -> MCPServer:
    """Assemble an :class:`MCPServer` for *settings* writing to *sink*."""
    collaborators = collaborators or build_collaborators(config)
    stats = stats or StatsCalculator(settings, anthropic_model=config.anthropic_model)
    return MCPServer(
        build_registry(settings, collaborators, stats),
        sink,
        info=server_info(),
        collaborators=collaborators,
        request_timeout=config.request_timeout,
        max_line_bytes=config.max_line_bytes,
    )


async def serve_stdio(
    settings: Settings,
    config: ServerConfig,
    *,
    store: SettingsStore | None = None,
) -> None:
    """Serve on stdin/stdout until EOF, SIGINT or SIGTERM."""
    collaborators = await prepare_collaborators(config, store)

    server = build_server(
        settings,
        config,
        LineWriter(sys.stdout.buffer),
        collaborators=collaborators,
    )
    reader = await open_stdin_reader()

    task = asyncio.current_task()
    loop = asyncio.get_running_loop()
    assert task is not None
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _request_stop, sig, task)
        except NotImplementedError:  # pragma: no cover - Windows event loops
            pass

    try:
        await server.serve(reader)
    except asyncio.CancelledError:
        logger.info("Server stopped by signal")


def _request_stop(sig: signal.Signals, task: asyncio.Task[None]) -> None:
    logger.info("Received %s. Shutting down...", sig.name)
    task.cancel()
