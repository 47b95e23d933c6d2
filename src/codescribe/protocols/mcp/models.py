"""MCP models — JSON-RPC 2.0 messages and capability descriptors.

Implements the message format served over stdio for tool discovery
(``tools/list``), execution (``tools/call``) and resource reads
(``resources/list``, ``resources/get``).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

JSONRPC_VERSION = "2.0"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class Method(str, Enum):
    """Methods the server dispatches."""

    INITIALIZE = "initialize"
    SHUTDOWN = "shutdown"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_GET = "resources/get"


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message.

    ``id`` is ``None`` for notifications; ``is_notification`` tells the two
    apart because an explicit ``"id": null`` still expects an answer.
    """

    jsonrpc: str = JSONRPC_VERSION
    method: str
    id: Any = None
    params: dict[str, Any] = Field(default_factory=dict)
    is_notification: bool = Field(default=False, exclude=True)

    @classmethod
    def from_message(cls, message: dict[str, Any]) -> JsonRpcRequest:
        params = message.get("params")
        return cls(
            jsonrpc=message.get("jsonrpc", ""),
            method=message["method"],
            id=message.get("id"),
            params=params if isinstance(params, dict) else {},
            is_notification="id" not in message,
        )


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, message_id: Any, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=message_id, result=result)

    @classmethod
    def failure(cls, message_id: Any, error: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=message_id, error=JsonRpcError.model_validate(error))

    def to_wire(self) -> dict[str, Any]:
        """Dump to the on-the-wire dict: exactly one of ``result``/``error``."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result if self.result is not None else {}
        return payload


# ---------------------------------------------------------------------------
# Capability descriptors
# ---------------------------------------------------------------------------


class ToolDescriptor(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True, "frozen": True}

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ResourceDescriptor(BaseModel):
    """A resource definition as returned by ``resources/list``."""

    model_config = {"populate_by_name": True, "frozen": True}

    name: str
    description: str = ""
    content_schema: dict[str, Any] = Field(default_factory=dict, alias="schema")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ServerInfo(BaseModel):
    """Capability advertisement sent in reply to ``initialize``."""

    model_config = {"populate_by_name": True, "frozen": True}

    server_name: str = Field(alias="serverName")
    server_version: str = Field(alias="serverVersion")
    protocol_version: str = Field(default="0.1", alias="protocolVersion")
    capabilities: dict[str, bool] = Field(
        default_factory=lambda: {
            "tools": True,
            "resources": True,
            "prompts": False,
            "roots": False,
        }
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
