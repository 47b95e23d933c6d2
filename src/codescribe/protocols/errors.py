"""Shared error types for the protocol layer.

Every error carries the JSON-RPC ``code`` it maps to, so the dispatcher can
turn any raised :class:`ProtocolError` into a wire error object without a
lookup table.
"""

from __future__ import annotations

from typing import Any

INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
TOOL_CALL_FAILURE = -32603
INTERNAL_ERROR = -32000
REQUEST_TIMEOUT = -32001


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, *, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)

    def to_error(self) -> dict[str, Any]:
        """Return the JSON-RPC ``error`` member for this failure."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class InvalidRequestError(ProtocolError):
    """The message is not a valid JSON-RPC 2.0 request."""

    code = INVALID_REQUEST


class FrameTooLargeError(InvalidRequestError):
    """A single line exceeded the configured maximum length."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Message exceeds maximum line length of {limit} bytes")


class MethodNotFoundError(ProtocolError):
    """The requested method is not part of the dispatch table."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class UnknownCapabilityError(ProtocolError):
    """A tool or resource name is not registered."""

    code = METHOD_NOT_FOUND

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind}: {name}")


class MissingParameterError(ProtocolError):
    """A required parameter is absent or has the wrong shape."""

    code = INVALID_PARAMS


class ToolCallError(ProtocolError):
    """A tool handler failed after its input was accepted."""

    code = TOOL_CALL_FAILURE

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Error handling tool call: {detail}" if detail else "Error handling tool call")


class InternalError(ProtocolError):
    """Catch-all for failures raised outside tool handlers."""

    code = INTERNAL_ERROR


class RequestTimeoutError(ProtocolError):
    """A request did not finish before its deadline."""

    code = REQUEST_TIMEOUT

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Request timed out after {timeout}s")
