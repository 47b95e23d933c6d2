"""Protocol layer — JSON-RPC error taxonomy, capability registry, and MCP server."""

from codescribe.protocols.errors import (
    FrameTooLargeError,
    InternalError,
    InvalidRequestError,
    MethodNotFoundError,
    MissingParameterError,
    ProtocolError,
    RequestTimeoutError,
    ToolCallError,
    UnknownCapabilityError,
)
from codescribe.protocols.registry import CapabilityRegistry

__all__ = [
    "CapabilityRegistry",
    "FrameTooLargeError",
    "InternalError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "MissingParameterError",
    "ProtocolError",
    "RequestTimeoutError",
    "ToolCallError",
    "UnknownCapabilityError",
]
