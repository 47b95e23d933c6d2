"""MCP protocol — newline-delimited JSON-RPC server over stdio."""

from codescribe.protocols.mcp.framer import MessageFramer
from codescribe.protocols.mcp.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    Method,
    ResourceDescriptor,
    ServerInfo,
    ToolDescriptor,
)
from codescribe.protocols.mcp.server import MCPServer, Phase
from codescribe.protocols.mcp.transport import LineWriter, MessageSink, open_stdin_reader

__all__ = [
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "LineWriter",
    "MCPServer",
    "MessageFramer",
    "MessageSink",
    "Method",
    "Phase",
    "ResourceDescriptor",
    "ServerInfo",
    "ToolDescriptor",
    "open_stdin_reader",
]
